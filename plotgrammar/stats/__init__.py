"""Statistics; importing this package registers the built-in ones."""

from plotgrammar.stats.base import STATS, Stat
from plotgrammar.stats.bin import StatBin
from plotgrammar.stats.count import StatCount
from plotgrammar.stats.identity import StatIdentity
from plotgrammar.stats.unique import StatUnique

__all__ = ["STATS", "Stat", "StatBin", "StatCount", "StatIdentity", "StatUnique"]

"""Position adjustments; importing this package registers the built-in ones."""

from plotgrammar.positions.base import POSITIONS, Position
from plotgrammar.positions.dodge import PositionDodge
from plotgrammar.positions.identity import PositionIdentity
from plotgrammar.positions.jitter import PositionJitter
from plotgrammar.positions.stack import PositionFill, PositionStack

__all__ = ["POSITIONS", "Position", "PositionDodge", "PositionFill", "PositionIdentity", "PositionJitter", "PositionStack"]

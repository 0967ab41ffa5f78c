"""Aesthetic mappings and their evaluation against a frame.

An aesthetic mapping binds a visual property name (``x``, ``colour``, ...) to an
unevaluated expression. Expressions are column names or pandas expressions
(``"displ * 2"``), callables taking the frame, or constants. Expressions marked
as *calculated* refer to columns a statistic produces and are evaluated only
after the statistic has run.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from plotgrammar.exceptions import AestheticEvaluationError, AestheticLengthMismatch, MissingRequiredAesthetic

CALC_ENV = {
    "np": np,
    "pd": pd,
    "math": math,
    "log": np.log,
    "log10": np.log10,
    "exp": np.exp,
    "sqrt": np.sqrt,
    "abs": np.abs,
    "clip": np.clip,
}

BASE_AES_NAMES = {
    "color": "colour",
    "fg": "colour",
    "pch": "shape",
    "cex": "size",
    "lwd": "size",
    "lty": "linetype",
    "srt": "angle",
    "adj": "hjust",
    "bg": "fill",
    "min": "ymin",
    "max": "ymax",
}

_DOTTED = re.compile(r"^\.\.([A-Za-z_][A-Za-z0-9_.]*)\.\.$")
_AFTER_STAT = re.compile(r"^after_stat\((.+)\)$")


@dataclass(frozen=True)
class Const:
    """A literal value that must not be interpreted as a column name."""

    value: Any


@dataclass(frozen=True)
class AesExpr:
    """One unevaluated aesthetic expression."""

    expr: Any
    calculated: bool = False

    def __repr__(self) -> str:
        if isinstance(self.expr, Const):
            return repr(self.expr.value)
        text = getattr(self.expr, "__name__", None) if callable(self.expr) else None
        text = text or str(self.expr)
        return f"after_stat({text})" if self.calculated else text


class Aes(dict):
    """Ordered mapping from aesthetic name to :class:`AesExpr`."""

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}={expr!r}" for name, expr in self.items())
        return f"aes({inner})"


def as_aes_expr(value: Any) -> AesExpr:
    """Wrap a raw mapping value, recognising calculated markers in strings."""
    if isinstance(value, AesExpr):
        return value
    if isinstance(value, str):
        text = value.strip()
        match = _AFTER_STAT.match(text) or _DOTTED.match(text)
        if match:
            return AesExpr(match.group(1).strip(), calculated=True)
        return AesExpr(text)
    return AesExpr(value)


def aes(**mapping: Any) -> Aes:
    """Create an aesthetic mapping; standard aesthetic aliases are renamed."""
    return Aes((standardise_aes_name(name), as_aes_expr(value)) for name, value in mapping.items())


def after_stat(expr: Any) -> AesExpr:
    """Mark an expression as computed from statistic output."""
    return AesExpr(expr, calculated=True)


def const(value: Any) -> AesExpr:
    """Map an aesthetic to a literal value."""
    return AesExpr(Const(value))


def standardise_aes_name(name: str) -> str:
    """Translate an alias such as ``color`` to its canonical aesthetic name."""
    return BASE_AES_NAMES.get(name, name)


def rename_aes(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``mapping`` with standardised aesthetic names as keys."""
    return {standardise_aes_name(name): value for name, value in mapping.items()}


def is_calculated(expr: AesExpr | Any) -> bool:
    """Whether an expression refers to statistic output."""
    return as_aes_expr(expr).calculated


def strip_dots(mapping: Mapping[str, AesExpr]) -> Aes:
    """Drop the calculated marker from every expression in ``mapping``."""
    return Aes((name, AesExpr(expr.expr)) for name, expr in mapping.items())


def defaults(mapping: Mapping[str, AesExpr] | None, fallback: Mapping[str, AesExpr] | None) -> Aes:
    """Merge two mappings; entries of ``mapping`` win on name collisions."""
    merged = Aes(fallback or {})
    merged.update(mapping or {})
    # keep the preferred mapping's order first
    ordered = Aes((name, merged[name]) for name in (mapping or {}))
    ordered.update((name, value) for name, value in merged.items() if name not in ordered)
    return ordered


def evaluate_aesthetic(name: str, expr: AesExpr, data: pd.DataFrame, env: Mapping[str, Any] | None = None) -> Any:
    """Evaluate one expression against ``data``, returning a 1-d array.

    ``env`` is the fallback scope for names that are not columns of ``data``.
    """
    scope = {**CALC_ENV, **(env or {})}
    value = expr.expr
    try:
        if isinstance(value, Const):
            result = value.value
        elif callable(value):
            result = value(data)
        elif isinstance(value, str):
            if value in data.columns:
                result = data[value]
            elif value in scope:
                result = scope[value]
            else:
                # columns shadow scope names, as they do for plain column lookups
                columns = {column: data[column] for column in data.columns}
                result = data.eval(value, engine="python", local_dict=scope, resolvers=(columns, scope))
        else:
            result = value
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise AestheticEvaluationError(f"Could not evaluate aesthetic '{name}' from {expr!r}: {exc}") from exc
    return _as_array(result)


def _as_array(result: Any) -> Any:
    # categoricals stay categorical so level order survives into the frame
    if isinstance(result, pd.Categorical):
        return result
    if isinstance(result, pd.Series | pd.Index):
        return result.array if isinstance(result.dtype, pd.CategoricalDtype) else result.to_numpy()
    if isinstance(result, np.ndarray):
        return result.reshape(-1)
    if isinstance(result, str) or not isinstance(result, Iterable):
        return np.asarray([result], dtype=object if isinstance(result, str) or result is None else None)
    return np.asarray(list(result))


def check_aesthetics(evaled: Mapping[str, np.ndarray], n: int) -> None:
    """Raise if any evaluated aesthetic is neither length 1 nor ``n``."""
    bad = {name: len(values) for name, values in evaled.items() if len(values) not in (1, n)}
    if bad:
        details = ", ".join(f"{name} ({length})" for name, length in bad.items())
        raise AestheticLengthMismatch(f"Aesthetics must be either length 1 or the same as the data ({n}): {details}")


def check_required_aesthetics(required: Iterable[str], present: Iterable[str], name: str) -> None:
    """Raise ``MissingRequiredAesthetic`` naming ``name`` if any of ``required`` is absent."""
    available = set(present)
    missing = [aesthetic for aesthetic in required if aesthetic not in available]
    if missing:
        raise MissingRequiredAesthetic(name, missing)


__all__ = [
    "CALC_ENV",
    "Aes",
    "AesExpr",
    "Const",
    "aes",
    "after_stat",
    "as_aes_expr",
    "check_aesthetics",
    "check_required_aesthetics",
    "const",
    "defaults",
    "evaluate_aesthetic",
    "is_calculated",
    "rename_aes",
    "standardise_aes_name",
    "strip_dots",
]

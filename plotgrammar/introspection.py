"""Helpers for deriving capability parameters from method signatures."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable, Mapping
from typing import Any


def signature_params(method: Callable[..., Any], skip: int) -> list[str]:
    """Named parameters of ``method`` after its first ``skip`` positional arguments."""
    params = list(inspect.signature(method).parameters.values())[skip:]
    return [
        param.name
        for param in params
        if param.kind in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)
    ]


def accepts_var_kwargs(method: Callable[..., Any]) -> bool:
    """Whether ``method`` takes ``**kwargs``."""
    return any(param.kind is inspect.Parameter.VAR_KEYWORD for param in inspect.signature(method).parameters.values())


def select_params(method: Callable[..., Any], params: Mapping[str, Any], skip: int) -> dict[str, Any]:
    """The subset of ``params`` that ``method`` accepts as keyword arguments."""
    if accepts_var_kwargs(method):
        return dict(params)
    accepted = set(signature_params(method, skip))
    return {name: value for name, value in params.items() if name in accepted}


def overrides(cls: type, base: type, method: str) -> bool:
    """Whether ``cls`` (or an intermediate base) replaces ``base.method``."""
    return getattr(cls, method) is not getattr(base, method)


def unique(names: Iterable[str]) -> list[str]:
    """Deduplicate while preserving first-seen order."""
    return list(dict.fromkeys(names))


__all__ = ["accepts_var_kwargs", "overrides", "select_params", "signature_params", "unique"]

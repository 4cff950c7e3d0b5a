"""Presence-based constraints across groups of parameters."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .options import is_present

MIN_GROUP_SIZE = 2


def count_present(params: Mapping[str, Any], names: Sequence[str]) -> int:
    """Count the names whose values are present in ``params``."""
    return sum(1 for name in names if is_present(params.get(name)))


def check_one_of(params: Mapping[str, Any], names: Sequence[str]) -> str | None:
    """Check that at most one of ``names`` is present.

    Args:
        params: Request parameters
        names: Group of parameter names

    Returns:
        Failure message, or None when the check passes or the group has
        fewer than two names
    """
    if len(names) < MIN_GROUP_SIZE:
        return None
    if count_present(params, names) > 1:
        return f"Only one of [{', '.join(names)}] is allowed"
    return None


def check_any_of(params: Mapping[str, Any], names: Sequence[str]) -> str | None:
    """Check that at least one of ``names`` is present.

    Args:
        params: Request parameters
        names: Group of parameter names

    Returns:
        Failure message, or None when the check passes or the group has
        fewer than two names
    """
    if len(names) < MIN_GROUP_SIZE:
        return None
    if count_present(params, names) < 1:
        return f"One of parameters [{', '.join(names)}] is required"
    return None

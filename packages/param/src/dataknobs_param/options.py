"""Option bag handling and presence rules shared by the engine.

Option keys that collide with Python keywords (``in``, ``raise``) may be
passed with a trailing underscore (``in_``, ``raise_``); ``normalize_options``
maps them back while keeping declaration order, which decides the order in
which validations run and failures are reported.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

VALIDATION_KEYS = frozenset({
    "required",
    "blank",
    "format",
    "is",
    "in",
    "within",
    "range",
    "min",
    "max",
    "min_length",
    "max_length",
})

PIPELINE_KEYS = frozenset({"default", "transform", "delimiter", "separator", "raise"})

_NON_WHITESPACE = re.compile(r"\S")


def normalize_options(
    options: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> dict[str, Any]:
    """Merge an options mapping with keyword options, preserving order.

    Args:
        options: Options given as a mapping (may use ``in``/``raise`` directly)
        **kwargs: Options given as keywords; a trailing underscore is dropped

    Returns:
        A new ordered dict of option key to value
    """
    merged: dict[str, Any] = {}
    for source in (options or {}, kwargs):
        for key, value in source.items():
            key = str(key)
            if key.endswith("_") and key[:-1] in VALIDATION_KEYS | PIPELINE_KEYS:
                key = key[:-1]
            merged[key] = value
    return merged


def is_blank(value: Any) -> bool:
    """Presence rule for cross-field checks.

    A value is blank when it is None, or when it is a string, list or map
    that is empty.
    """
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def is_present(value: Any) -> bool:
    """Inverse of ``is_blank``."""
    return not is_blank(value)


def is_blank_value(value: Any) -> bool:
    """Blankness rule for the ``blank`` option.

    Strings are blank unless they contain a non-whitespace character; lists
    and maps are blank when empty; anything else is blank only when None.
    """
    if isinstance(value, str):
        return _NON_WHITESPACE.search(value) is None
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return value is None

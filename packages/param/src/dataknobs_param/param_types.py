"""Target types for parameter coercion.

The set of target types is closed: every declaration resolves to one
``ParamType`` member (or to ``None`` for an unsupported type, which the
coercer treats as a pass-through to ``None``).
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class ParamType(Enum):
    """Enumeration of supported parameter types.

    Attributes:
        INTEGER: Whole numbers (``int``)
        FLOAT: Decimal numbers (``float``)
        STRING: Text (``str``)
        BOOLEAN: True/False values (``bool``)
        DATE: Calendar dates (``datetime.date``)
        DATETIME: Date and time values (``datetime.datetime``)
        TIME: Time of day (``datetime.time``); a full timestamp is reduced
            to its time component and its date is dropped
        ARRAY: List of strings split from a delimited string
        HASH: Dict of strings decoded from a delimited ``key:value`` string

    Example:
        ```python
        ParamType.resolve(int)        # ParamType.INTEGER
        ParamType.resolve("array")    # ParamType.ARRAY
        ParamType.resolve(bytes)      # None (unsupported)
        ```
    """

    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    ARRAY = "array"
    HASH = "hash"

    @property
    def label(self) -> str:
        """Readable type name used in failure messages."""
        return _LABELS[self]

    @property
    def native_type(self) -> type | tuple[type, ...]:
        """Python type(s) a value already has when no coercion is needed."""
        return _NATIVE_TYPES[self]

    def is_native(self, value: Any) -> bool:
        """Check whether a value already has this type's representation.

        The check never raises: a type check that cannot be answered is
        reported as a mismatch so the caller falls through to parsing.
        """
        try:
            if self in (ParamType.INTEGER, ParamType.FLOAT) and isinstance(value, bool):
                return False
            return isinstance(value, self.native_type)
        except TypeError:
            return False

    @classmethod
    def resolve(cls, target_type: Any) -> ParamType | None:
        """Resolve a declared type to a ParamType.

        Args:
            target_type: A ParamType, a Python type, or a type name

        Returns:
            The matching ParamType, or None when the type is not supported
        """
        if isinstance(target_type, ParamType):
            return target_type
        if isinstance(target_type, str):
            resolved = _NAME_ALIASES.get(target_type.strip().lower())
        else:
            try:
                resolved = _PYTHON_TYPES.get(target_type)
            except TypeError:
                resolved = None
        if resolved is None:
            logger.warning(f"Unsupported parameter type: {target_type!r}")
        return resolved


_LABELS = {
    ParamType.INTEGER: "Integer",
    ParamType.FLOAT: "Float",
    ParamType.STRING: "String",
    ParamType.BOOLEAN: "Boolean",
    ParamType.DATE: "Date",
    ParamType.DATETIME: "DateTime",
    ParamType.TIME: "Time",
    ParamType.ARRAY: "Array",
    ParamType.HASH: "Hash",
}

_NATIVE_TYPES: dict[ParamType, type | tuple[type, ...]] = {
    ParamType.INTEGER: int,
    ParamType.FLOAT: float,
    ParamType.STRING: str,
    ParamType.BOOLEAN: bool,
    ParamType.DATE: date,
    ParamType.DATETIME: datetime,
    ParamType.TIME: time,
    ParamType.ARRAY: list,
    ParamType.HASH: dict,
}

_PYTHON_TYPES: dict[Any, ParamType] = {
    int: ParamType.INTEGER,
    float: ParamType.FLOAT,
    str: ParamType.STRING,
    bool: ParamType.BOOLEAN,
    date: ParamType.DATE,
    datetime: ParamType.DATETIME,
    time: ParamType.TIME,
    list: ParamType.ARRAY,
    dict: ParamType.HASH,
}

_NAME_ALIASES = {
    "int": ParamType.INTEGER,
    "integer": ParamType.INTEGER,
    "float": ParamType.FLOAT,
    "double": ParamType.FLOAT,
    "str": ParamType.STRING,
    "string": ParamType.STRING,
    "bool": ParamType.BOOLEAN,
    "boolean": ParamType.BOOLEAN,
    "date": ParamType.DATE,
    "datetime": ParamType.DATETIME,
    "time": ParamType.TIME,
    "list": ParamType.ARRAY,
    "array": ParamType.ARRAY,
    "dict": ParamType.HASH,
    "hash": ParamType.HASH,
    "map": ParamType.HASH,
}

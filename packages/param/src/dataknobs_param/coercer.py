"""Coercion of raw request values to declared parameter types.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Any

from .exceptions import CoercionError
from .param_types import ParamType
from .result import ValidationResult

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = ","
DEFAULT_SEPARATOR = ":"

_FALSE_PATTERN = re.compile(r"(false|f|no|n|0)$", re.IGNORECASE)
_TRUE_PATTERN = re.compile(r"(true|t|yes|y|1)$", re.IGNORECASE)

_DATETIME_FORMATS = [
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%d %H:%M',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%dT%H:%M:%SZ',
    '%Y-%m-%dT%H:%M:%S.%f',
    '%Y-%m-%dT%H:%M:%S.%fZ',
    '%Y/%m/%d %H:%M:%S',
    '%Y/%m/%d',
    '%Y-%m-%d',
    '%Y%m%d',
    '%d/%m/%Y',
    '%d-%m-%Y',
    '%m/%d/%Y',
    '%m-%d-%Y',
    '%d %B %Y',
    '%d %b %Y',
    '%B %d, %Y',
    '%b %d, %Y',
    '%B %d %Y',
    '%b %d %Y',
    '%a, %d %b %Y %H:%M:%S',
]

_TIME_FORMATS = [
    '%H:%M',
    '%H:%M:%S',
    '%H:%M:%S.%f',
    '%I:%M %p',
    '%I:%M:%S %p',
    '%I:%M%p',
    '%I %p',
    '%I%p',
]


class Coercer:
    """Converts raw request values to a declared ``ParamType``.

    ``coerce`` raises ``CoercionError`` when a value cannot be parsed;
    ``try_coerce`` reports the same outcome as a ``ValidationResult``.

    Values that already have the target representation are returned
    unchanged, ``None`` stays ``None``, and an unsupported target type
    coerces to ``None`` rather than failing.
    """

    def __init__(self) -> None:
        self._coercion_map: dict[ParamType, Callable[[Any, Mapping[str, Any]], Any]] = {
            ParamType.INTEGER: self._to_int,
            ParamType.FLOAT: self._to_float,
            ParamType.STRING: self._to_string,
            ParamType.BOOLEAN: self._to_bool,
            ParamType.DATE: self._to_date,
            ParamType.DATETIME: self._to_datetime,
            ParamType.TIME: self._to_time,
            ParamType.ARRAY: self._to_list,
            ParamType.HASH: self._to_dict,
        }

    def coerce(
        self,
        value: Any,
        target_type: Any,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        """Coerce a value to the target type.

        Args:
            value: Raw value from the request
            target_type: ParamType, Python type or type name
            options: Options bag; ``delimiter`` and ``separator`` are used
                for Array and Hash coercion

        Returns:
            Coerced value, or None for a None value or unsupported type

        Raises:
            CoercionError: If the value cannot be parsed as the target type
        """
        if value is None:
            return None

        param_type = ParamType.resolve(target_type)
        if param_type is None:
            return None

        if param_type.is_native(value):
            return value

        try:
            return self._coercion_map[param_type](value, options or {})
        except (ValueError, TypeError, OverflowError) as e:
            logger.debug(f"Cannot coerce {value!r} to {param_type.label}: {e}")
            raise CoercionError(value, param_type.label) from e

    def try_coerce(
        self,
        value: Any,
        target_type: Any,
        options: Mapping[str, Any] | None = None,
    ) -> ValidationResult:
        """Coerce a value, reporting failure as a result instead of raising.

        Args:
            value: Raw value from the request
            target_type: ParamType, Python type or type name
            options: Options bag

        Returns:
            ValidationResult with the coerced value or the coercion message
        """
        try:
            return ValidationResult.success(self.coerce(value, target_type, options))
        except CoercionError as e:
            return ValidationResult.failure(value, [e.message])

    def _to_int(self, value: Any, options: Mapping[str, Any]) -> int:
        if isinstance(value, bool):
            raise TypeError("booleans are not integers")
        if isinstance(value, str):
            text = value.strip()
            prefix = text[:2].lower()
            if prefix == '0x':
                return int(text, 16)
            elif prefix == '0o':
                return int(text, 8)
            elif prefix == '0b':
                return int(text, 2)
            return int(text)
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(f"Float {value} cannot be losslessly converted to int")
            return int(value)
        return int(value)

    def _to_float(self, value: Any, options: Mapping[str, Any]) -> float:
        if isinstance(value, bool):
            raise TypeError("booleans are not floats")
        result = float(value.strip() if isinstance(value, str) else value)
        if isinstance(value, str) and not math.isfinite(result):
            raise ValueError(f"'{value}' is not a finite number")
        return result

    def _to_string(self, value: Any, options: Mapping[str, Any]) -> str:
        if isinstance(value, (bytes, bytearray)):
            return value.decode('utf-8')
        return str(value)

    def _to_bool(self, value: Any, options: Mapping[str, Any]) -> bool | None:
        text = str(value)
        if _FALSE_PATTERN.search(text):
            return False
        if _TRUE_PATTERN.search(text):
            return True
        # Neither pattern matched: not a failure, the value is just unset
        return None

    def _to_date(self, value: Any, options: Mapping[str, Any]) -> date:
        return self._to_datetime(value, options).date()

    def _to_datetime(self, value: Any, options: Mapping[str, Any]) -> datetime:
        if isinstance(value, str):
            return _parse_datetime(value.strip())
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            # Assume Unix timestamp
            return datetime.fromtimestamp(value)
        elif isinstance(value, date):
            return datetime(value.year, value.month, value.day)
        raise TypeError(f"Cannot coerce {type(value).__name__} to datetime")

    def _to_time(self, value: Any, options: Mapping[str, Any]) -> time:
        if isinstance(value, datetime):
            return value.timetz()
        if not isinstance(value, str):
            raise TypeError(f"Cannot coerce {type(value).__name__} to time")

        text = value.strip()
        for fmt in _TIME_FORMATS:
            try:
                return datetime.strptime(text, fmt).time()
            except ValueError:
                continue
        try:
            return time.fromisoformat(text)
        except ValueError:
            pass

        # A full timestamp contributes its time of day
        return _parse_datetime(text).timetz()

    def _to_list(self, value: Any, options: Mapping[str, Any]) -> list[Any]:
        if isinstance(value, str):
            return _split(value, options.get('delimiter') or DEFAULT_DELIMITER)
        elif isinstance(value, tuple):
            return list(value)
        raise TypeError(f"Cannot coerce {type(value).__name__} to list")

    def _to_dict(self, value: Any, options: Mapping[str, Any]) -> dict[str, Any]:
        if isinstance(value, str):
            delimiter = options.get('delimiter') or DEFAULT_DELIMITER
            separator = options.get('separator') or DEFAULT_SEPARATOR
            result: dict[str, Any] = {}
            for entry in _split(value, delimiter):
                parts = _split(entry, separator)
                if not 1 <= len(parts) <= 2:
                    raise ValueError(f"Entry '{entry}' is not a single key{separator}value pair")
                key = parts[0]
                item = parts[1] if len(parts) == 2 else None
                # Later pairs overwrite earlier ones with the same key
                result[key] = item
            return result
        elif isinstance(value, (list, tuple)):
            if all(isinstance(item, (list, tuple)) and len(item) == 2 for item in value):
                return dict(value)
            raise ValueError("Cannot convert list to dict")
        raise TypeError(f"Cannot coerce {type(value).__name__} to dict")


def _split(text: str, delimiter: str) -> list[str]:
    """Split on a delimiter, dropping trailing empty entries."""
    parts = text.split(delimiter)
    while parts and parts[-1] == '':
        parts.pop()
    return parts


def _parse_datetime(text: str) -> datetime:
    """Parse a date or timestamp in one of the common request formats."""
    for fmt in _DATETIME_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    # Try parsing as ISO format
    try:
        return datetime.fromisoformat(text.replace('Z', '+00:00'))
    except ValueError:
        pass

    raise ValueError(f"Could not parse datetime from '{text}'")

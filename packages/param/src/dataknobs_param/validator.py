"""Validation of coerced parameter values against declared options.

Options are checked in the order they were declared. ``validate`` returns
every failure message; ``validate_strict`` raises ``InvalidParameterError``
with the first one. Both walk the same checks, so ``validate_strict`` raises
exactly when ``validate`` returns a non-empty list, with its first message.

Supported options:

==============  ===============================================  =====================================================
Option          Passes when                                      Failure message
==============  ===============================================  =====================================================
required        option is false or value is not None              Parameter is required
blank           option is true or value is not blank              Parameter cannot be blank
format          value is None, or a string matching the pattern   Parameter must be a string if using the format
                                                                 validation / Parameter must match format <p>
is              value equals the option                           Parameter must be <v>
in/within/      value is None or contained in the option          Parameter must be within <v>
range
min             value is None or option <= value                  Parameter cannot be less than <n>
max             value is None or option >= value                  Parameter cannot be greater than <n>
min_length      value is None or option <= len(value)             Parameter cannot have length less than <n>
max_length      value is None or option >= len(value)             Parameter cannot have length greater than <n>
==============  ===============================================  =====================================================

Any other option key is ignored here.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Container, Iterator, Mapping
from re import Pattern as RegexPattern
from typing import TYPE_CHECKING, Any

from .exceptions import InvalidParameterError
from .options import is_blank_value

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def _check_required(value: Any, option: Any) -> str | None:
    if option and value is None:
        return "Parameter is required"
    return None


def _check_blank(value: Any, option: Any) -> str | None:
    if not option and is_blank_value(value):
        return "Parameter cannot be blank"
    return None


def _check_format(value: Any, option: str | RegexPattern) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        return "Parameter must be a string if using the format validation"
    pattern = option.pattern if isinstance(option, RegexPattern) else option
    if re.search(option, value) is None:
        return f"Parameter must match format {pattern}"
    return None


def _check_is(value: Any, option: Any) -> str | None:
    if value != option:
        return f"Parameter must be {option}"
    return None


def _check_within(value: Any, option: Any) -> str | None:
    if value is None:
        return None
    if isinstance(option, (str, bytes)) or not isinstance(option, Container):
        allowed: Container[Any] = [option]
    else:
        allowed = option
    if value not in allowed:
        return f"Parameter must be within {option}"
    return None


def _check_min(value: Any, option: Any) -> str | None:
    if value is not None and not option <= value:
        return f"Parameter cannot be less than {option}"
    return None


def _check_max(value: Any, option: Any) -> str | None:
    if value is not None and not option >= value:
        return f"Parameter cannot be greater than {option}"
    return None


def _check_min_length(value: Any, option: int) -> str | None:
    if value is not None and not option <= len(value):
        return f"Parameter cannot have length less than {option}"
    return None


def _check_max_length(value: Any, option: int) -> str | None:
    if value is not None and not option >= len(value):
        return f"Parameter cannot have length greater than {option}"
    return None


_CHECKS: dict[str, Callable[[Any, Any], str | None]] = {
    "required": _check_required,
    "blank": _check_blank,
    "format": _check_format,
    "is": _check_is,
    "in": _check_within,
    "within": _check_within,
    "range": _check_within,
    "min": _check_min,
    "max": _check_max,
    "min_length": _check_min_length,
    "max_length": _check_max_length,
}


class Validator:
    """Applies declared options to an already-coerced value."""

    def iter_failures(self, value: Any, options: Mapping[str, Any]) -> Iterator[str]:
        """Yield failure messages lazily, in option declaration order.

        Args:
            value: Coerced value
            options: Options bag

        Yields:
            One message per violated option
        """
        for key, option in options.items():
            check = _CHECKS.get(key)
            if check is None:
                continue
            message = check(value, option)
            if message is not None:
                yield message

    def validate(self, value: Any, options: Mapping[str, Any]) -> list[str]:
        """Collect every failure message for a value.

        Args:
            value: Coerced value
            options: Options bag

        Returns:
            Failure messages in declaration order (empty when valid)
        """
        return list(self.iter_failures(value, options))

    def validate_strict(self, value: Any, options: Mapping[str, Any]) -> None:
        """Validate a value, raising on the first violated option.

        Args:
            value: Coerced value
            options: Options bag

        Raises:
            InvalidParameterError: With the first failure message
        """
        message = next(self.iter_failures(value, options), None)
        if message is not None:
            logger.debug(f"Validation failed for {value!r}: {message}")
            raise InvalidParameterError(message, options=dict(options))

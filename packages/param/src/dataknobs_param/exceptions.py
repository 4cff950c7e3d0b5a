"""Exception hierarchy for request parameter handling.

All failures raised by this package extend ``ParamError``, which follows the
dataknobs convention of a human-readable message plus an optional context
dictionary.

Example:
    ```python
    from dataknobs_param.exceptions import InvalidParameterError

    try:
        processor.param_strict("age", int, min=18, raise_=True)
    except InvalidParameterError as e:
        logger.error(f"{e.param}: {e}")
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from .payload import ErrorPayload


class ParamError(Exception):
    """Base exception for the param package.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context

    @property
    def message(self) -> str:
        """The human-readable failure message."""
        return str(self)


class InvalidParameterError(ParamError):
    """Raised when a parameter cannot be coerced or fails validation.

    ``param`` and ``options`` are filled in by the processor before the error
    propagates to the host, so a central error handler can report which
    parameter (or group of parameters) failed and under which options.

    Attributes:
        param: Parameter name, or a tuple of names for cross-field checks
        options: Options bag the parameter was declared with
    """

    def __init__(
        self,
        message: str,
        param: str | tuple[str, ...] | None = None,
        options: Dict[str, Any] | None = None,
        context: Dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.param = param
        self.options = options if options is not None else {}


class CoercionError(InvalidParameterError):
    """Raised when a raw value cannot be converted to the requested type."""

    def __init__(self, value: Any, type_name: str):
        super().__init__(
            f"'{value}' is not a valid {type_name}",
            context={"value": value, "type": type_name},
        )
        self.value = value
        self.type_name = type_name


class ParameterHalt(ParamError):
    """Raised to stop request handling with a rendered 400 payload.

    This is the non-propagating branch of exception mode: instead of letting
    ``InvalidParameterError`` reach the host's error handlers, the failure is
    converted to an ``ErrorPayload`` and rendered for the response body.

    Attributes:
        payload: Structured failure description
        body: Rendered response body (JSON text or the plain message)
        is_json: Whether body is JSON text
        status_code: HTTP status the host should respond with
    """

    status_code = 400

    def __init__(self, payload: ErrorPayload, body: str, is_json: bool = False):
        super().__init__(payload.message, context={"errors": payload.errors})
        self.payload = payload
        self.body = body
        self.is_json = is_json


class SettingsError(ParamError):
    """Raised when param settings are invalid."""

    pass


__all__ = [
    "ParamError",
    "InvalidParameterError",
    "CoercionError",
    "ParameterHalt",
    "SettingsError",
]

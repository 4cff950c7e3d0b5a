"""Per-request processing of declared parameters.

A ``ParamProcessor`` wraps one request's mutable parameter mapping. Each
declaration runs the pipeline coerce -> default -> transform -> validate and
writes the resulting value back under the parameter's name, so later code
reads it already typed.

Every entry point comes in three forms:

- ``*_strict``: exception mode. A failure raises ``InvalidParameterError`` when
  propagation is requested (``raise_=True`` or ``settings.propagate_errors``),
  otherwise ``ParameterHalt`` carrying a rendered 400 payload.
- ``*_or_report``: accumulation mode. Failures are returned as
  ``{name: [messages]}`` (or ``None`` when the parameter is valid).
- the plain name: uses ``settings.failure_mode`` to pick one of the above.

Example:
    ```python
    processor = ParamProcessor(dict(request.args), ParamSettings())
    processor.param("page", int, default=1, min=1)
    processor.param("order", str, in_=["asc", "desc"])
    processor.one_of("id", "slug")
    page = processor.params["page"]  # an int
    ```
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Callable, Iterable, Mapping, MutableMapping
from typing import Any, NoReturn

from .coercer import Coercer
from .cross_field import check_any_of, check_one_of
from .exceptions import InvalidParameterError, ParameterHalt
from .options import normalize_options
from .payload import ErrorPayload, FailureKey
from .settings import FailureMode, ParamSettings
from .validator import Validator

logger = logging.getLogger(__name__)

FieldFailure = dict[FailureKey, list[str]]


class ParamProcessor:
    """Coerces and validates declared parameters of a single request.

    Attributes:
        params: The request's parameter mapping, updated in place
        settings: Failure-mode settings for the ambient entry points
    """

    def __init__(
        self,
        params: MutableMapping[str, Any],
        settings: ParamSettings | None = None,
        wants_json: Callable[[], bool] | None = None,
        coercer: Coercer | None = None,
        validator: Validator | None = None,
    ):
        """Initialize the processor.

        Args:
            params: Mutable mapping of request parameters (owned by the host)
            settings: Failure-mode settings (default: raise, do not propagate)
            wants_json: Host hook telling whether the response is JSON; decides
                how a ``ParameterHalt`` body is rendered
            coercer: Coercer to use (default: a new Coercer)
            validator: Validator to use (default: a new Validator)
        """
        self.params = params
        self.settings = settings or ParamSettings()
        self._wants_json = wants_json
        self.coercer = coercer or Coercer()
        self.validator = validator or Validator()

    # Single parameters

    def param(
        self,
        name: str,
        param_type: Any,
        options: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> FieldFailure | None:
        """Declare a parameter using the configured failure mode."""
        if self.settings.failure_mode is FailureMode.ACCUMULATE:
            return self.param_or_report(name, param_type, options, **kwargs)
        self.param_strict(name, param_type, options, **kwargs)
        return None

    def param_strict(
        self,
        name: str,
        param_type: Any,
        options: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        """Declare a parameter in exception mode.

        Args:
            name: Parameter name
            param_type: ParamType, Python type or type name
            options: Options bag as a mapping
            **kwargs: Options as keywords (``in_``/``raise_`` for keyword clashes)

        Raises:
            InvalidParameterError: On failure when propagation is requested
            ParameterHalt: On failure otherwise
        """
        name = str(name)
        opts = normalize_options(options, **kwargs)
        if self._skip(name, opts):
            return

        try:
            value = self.coercer.coerce(self.params.get(name), param_type, opts)
            value = self._finish(name, value, opts)
            self.validator.validate_strict(value, opts)
        except InvalidParameterError as e:
            logger.debug(f"Parameter '{name}' failed: {e}")
            self._fail(e, name, opts, ErrorPayload.for_param(name, e.message))

    def param_or_report(
        self,
        name: str,
        param_type: Any,
        options: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> FieldFailure | None:
        """Declare a parameter in accumulation mode.

        Args:
            name: Parameter name
            param_type: ParamType, Python type or type name
            options: Options bag as a mapping
            **kwargs: Options as keywords

        Returns:
            ``{name: [messages]}`` when the parameter fails, else None
        """
        name = str(name)
        opts = normalize_options(options, **kwargs)
        if self._skip(name, opts):
            return None

        coerced = self.coercer.try_coerce(self.params.get(name), param_type, opts)
        if not coerced:
            logger.debug(f"Parameter '{name}' failed coercion: {coerced.errors}")
            return {name: coerced.errors}

        value = self._finish(name, coerced.value, opts)
        errors = self.validator.validate(value, opts)
        if errors:
            logger.debug(f"Parameter '{name}' failed validation: {errors}")
            return {name: errors}
        return None

    # Cross-field groups

    def one_of(self, *names: Any, options: Mapping[str, Any] | None = None, **kwargs: Any) -> FieldFailure | None:
        """Require at most one of ``names``, using the configured failure mode."""
        return self._group(check_one_of, names, options, kwargs, strict=None)

    def one_of_strict(self, *names: Any, options: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        """Require at most one of ``names`` (exception mode)."""
        self._group(check_one_of, names, options, kwargs, strict=True)

    def one_of_or_report(self, *names: Any, options: Mapping[str, Any] | None = None, **kwargs: Any) -> FieldFailure | None:
        """Require at most one of ``names`` (accumulation mode)."""
        return self._group(check_one_of, names, options, kwargs, strict=False)

    def any_of(self, *names: Any, options: Mapping[str, Any] | None = None, **kwargs: Any) -> FieldFailure | None:
        """Require at least one of ``names``, using the configured failure mode."""
        return self._group(check_any_of, names, options, kwargs, strict=None)

    def any_of_strict(self, *names: Any, options: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        """Require at least one of ``names`` (exception mode)."""
        self._group(check_any_of, names, options, kwargs, strict=True)

    def any_of_or_report(self, *names: Any, options: Mapping[str, Any] | None = None, **kwargs: Any) -> FieldFailure | None:
        """Require at least one of ``names`` (accumulation mode)."""
        return self._group(check_any_of, names, options, kwargs, strict=False)

    # Internals

    def _skip(self, name: str, opts: Mapping[str, Any]) -> bool:
        if name in self.params or opts.get("default") is not None or opts.get("required"):
            return False
        logger.debug(f"Skipping absent parameter '{name}'")
        return True

    def _finish(self, name: str, value: Any, opts: Mapping[str, Any]) -> Any:
        """Apply default and transform to a coerced value and write it back."""
        default = opts.get("default")
        if value is None and default is not None:
            value = default() if callable(default) else default

        transform = opts.get("transform")
        if value is not None and transform is not None:
            if isinstance(transform, str):
                transform = operator.methodcaller(transform)
            value = transform(value)

        self.params[name] = value
        return value

    def _group(
        self,
        check: Callable[[Mapping[str, Any], list[str]], str | None],
        names: tuple[Any, ...],
        options: Mapping[str, Any] | None,
        kwargs: dict[str, Any],
        strict: bool | None,
    ) -> FieldFailure | None:
        if strict is None:
            strict = self.settings.failure_mode is FailureMode.RAISE

        group = _group_names(names)
        opts = normalize_options(options, **kwargs)
        message = check(self.params, group)
        if message is None:
            return None

        logger.debug(f"Parameter group {group} failed: {message}")
        key = tuple(group)
        if strict:
            self._fail(
                InvalidParameterError(message),
                key,
                opts,
                ErrorPayload.for_group(group, message),
            )
        return {key: [message]}

    def _fail(
        self,
        error: InvalidParameterError,
        subject: FailureKey,
        opts: dict[str, Any],
        payload: ErrorPayload,
    ) -> NoReturn:
        error.param, error.options = subject, opts
        if opts.get("raise") or self.settings.propagate_errors:
            raise error
        as_json = bool(self._wants_json and self._wants_json())
        raise ParameterHalt(payload, payload.render(as_json=as_json), is_json=as_json) from error


def _group_names(names: tuple[Any, ...]) -> list[str]:
    """Flatten ``("a", "b")`` or ``(["a", "b"],)`` to a list of strings."""
    if len(names) == 1 and isinstance(names[0], (list, tuple)):
        names = tuple(names[0])
    return [str(name) for name in names]


def collect_failures(*results: FieldFailure | None) -> list[FieldFailure]:
    """Drop the ``None`` results of a batch of accumulation-mode calls.

    Example:
        ```python
        failures = collect_failures(
            processor.param_or_report("q", str, required=True),
            processor.param_or_report("limit", int, max=100),
        )
        ```
    """
    return [result for result in results if result is not None]


def merge_failures(results: Iterable[FieldFailure | None]) -> FieldFailure:
    """Fold accumulation-mode results into one mapping, keeping order."""
    merged: FieldFailure = {}
    for result in results:
        if not result:
            continue
        for key, messages in result.items():
            merged.setdefault(key, []).extend(messages)
    return merged

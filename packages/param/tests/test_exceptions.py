"""Tests for the exception hierarchy and error payloads."""

import json

from dataknobs_param import (
    CoercionError,
    ErrorPayload,
    InvalidParameterError,
    ParameterHalt,
    ParamError,
)


class TestExceptions:
    """Test exception attributes and hierarchy."""

    def test_param_error_context(self):
        error = ParamError("Failed", context={"key": "value"})
        assert error.message == "Failed"
        assert error.context == {"key": "value"}
        assert error.details is error.context

    def test_invalid_parameter_error_defaults(self):
        error = InvalidParameterError("Parameter is required")
        assert error.param is None
        assert error.options == {}
        assert isinstance(error, ParamError)

    def test_coercion_error(self):
        error = CoercionError("abc", "Integer")
        assert str(error) == "'abc' is not a valid Integer"
        assert error.context == {"value": "abc", "type": "Integer"}
        assert isinstance(error, InvalidParameterError)

    def test_parameter_halt(self):
        payload = ErrorPayload.for_param("q", "Parameter is required")
        halt = ParameterHalt(payload, payload.render())
        assert halt.status_code == 400
        assert halt.body == "Parameter is required"
        assert halt.context == {"errors": {"q": "Parameter is required"}}


class TestErrorPayload:
    """Test payload rendering."""

    def test_param_payload(self):
        payload = ErrorPayload.for_param("age", "Parameter cannot be less than 1")
        assert payload.to_dict() == {
            "message": "Parameter cannot be less than 1",
            "errors": {"age": "Parameter cannot be less than 1"},
        }
        assert json.loads(payload.render(as_json=True)) == payload.to_dict()

    def test_group_payload(self):
        payload = ErrorPayload.for_group(["a", "b"], "Only one of [a, b] is allowed")
        assert payload.errors == {("a", "b"): "Only one of [a, b] is allowed"}
        assert payload.render() == "Invalid parameters [a, b]"
        assert payload.to_dict()["errors"] == {"a, b": "Only one of [a, b] is allowed"}

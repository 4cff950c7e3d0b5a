"""Tests for coercion of raw request values."""

from datetime import date, datetime, time

import pytest

from dataknobs_param import Coercer, CoercionError, ParamType


@pytest.fixture
def coercer():
    return Coercer()


class TestParamType:
    """Test resolution of declared types."""

    def test_resolve_python_types(self):
        assert ParamType.resolve(int) is ParamType.INTEGER
        assert ParamType.resolve(float) is ParamType.FLOAT
        assert ParamType.resolve(bool) is ParamType.BOOLEAN
        assert ParamType.resolve(list) is ParamType.ARRAY
        assert ParamType.resolve(dict) is ParamType.HASH
        assert ParamType.resolve(datetime) is ParamType.DATETIME

    def test_resolve_names(self):
        assert ParamType.resolve("Integer") is ParamType.INTEGER
        assert ParamType.resolve("array") is ParamType.ARRAY
        assert ParamType.resolve("map") is ParamType.HASH
        assert ParamType.resolve(ParamType.TIME) is ParamType.TIME

    def test_resolve_unsupported(self):
        assert ParamType.resolve(bytes) is None
        assert ParamType.resolve("uuid") is None
        assert ParamType.resolve(["not", "hashable"]) is None


class TestCoercer:
    """Test the coercion matrix."""

    def test_none_stays_none(self, coercer):
        for param_type in ParamType:
            assert coercer.coerce(None, param_type) is None

    @pytest.mark.parametrize("value,target", [
        (5, int),
        (2.5, float),
        ("text", str),
        (True, bool),
        (False, bool),
        (date(2024, 1, 15), date),
        (datetime(2024, 1, 15, 10, 30), datetime),
        (time(10, 30), time),
        (["a", "b"], list),
        ({"a": "1"}, dict),
    ])
    def test_identity_for_native_values(self, coercer, value, target):
        assert coercer.coerce(value, target) is value

    def test_integer(self, coercer):
        assert coercer.coerce("42", int) == 42
        assert coercer.coerce(" -7 ", int) == -7
        assert coercer.coerce("0x1A", int) == 26
        assert coercer.coerce("0b101", int) == 5
        assert coercer.coerce(3.0, int) == 3

    @pytest.mark.parametrize("raw", ["12abc", "1.5", "", "abc"])
    def test_integer_failures(self, coercer, raw):
        with pytest.raises(CoercionError) as exc_info:
            coercer.coerce(raw, int)
        assert str(exc_info.value) == f"'{raw}' is not a valid Integer"
        assert exc_info.value.value == raw
        assert exc_info.value.type_name == "Integer"

    def test_integer_rejects_lossy_float_and_bool(self, coercer):
        with pytest.raises(CoercionError):
            coercer.coerce(2.5, int)
        with pytest.raises(CoercionError):
            coercer.coerce(True, int)

    def test_float(self, coercer):
        assert coercer.coerce("1.5", float) == 1.5
        assert coercer.coerce("1e3", float) == 1000.0
        assert coercer.coerce(2, float) == 2.0
        with pytest.raises(CoercionError, match="is not a valid Float"):
            coercer.coerce("1.5x", float)
        with pytest.raises(CoercionError):
            coercer.coerce("nan", float)

    def test_string(self, coercer):
        assert coercer.coerce(42, str) == "42"
        assert coercer.coerce(b"bytes", str) == "bytes"

    @pytest.mark.parametrize("raw", ["false", "F", "no", "N", "0", "10"])
    def test_boolean_false(self, coercer, raw):
        assert coercer.coerce(raw, bool) is False

    @pytest.mark.parametrize("raw", ["true", "T", "yes", "Y", "1", 1])
    def test_boolean_true(self, coercer, raw):
        assert coercer.coerce(raw, bool) is True

    def test_boolean_unmatched_is_none(self, coercer):
        assert coercer.coerce("maybe", bool) is None
        assert coercer.coerce("", ParamType.BOOLEAN) is None

    def test_boolean_round_trip(self, coercer):
        for raw in ["yes", "no"]:
            value = coercer.coerce(raw, bool)
            assert coercer.coerce(str(value), bool) is value

    def test_numeric_round_trip(self, coercer):
        assert coercer.coerce(str(coercer.coerce("17", int)), int) == 17
        assert coercer.coerce(str(coercer.coerce("0.25", float)), float) == 0.25

    def test_date(self, coercer):
        assert coercer.coerce("2024-01-15", date) == date(2024, 1, 15)
        assert coercer.coerce("January 15, 2024", "date") == date(2024, 1, 15)
        with pytest.raises(CoercionError, match="'not a date' is not a valid Date"):
            coercer.coerce("not a date", date)

    def test_datetime(self, coercer):
        assert coercer.coerce("2024-01-15T10:30:00", datetime) == datetime(2024, 1, 15, 10, 30)
        assert coercer.coerce("2024-01-15 10:30", datetime) == datetime(2024, 1, 15, 10, 30)
        parsed = coercer.coerce("2024-01-15T10:30:00+02:00", datetime)
        assert parsed.utcoffset().total_seconds() == 7200
        with pytest.raises(CoercionError, match="is not a valid DateTime"):
            coercer.coerce("soon", datetime)

    def test_time(self, coercer):
        assert coercer.coerce("10:30", time) == time(10, 30)
        assert coercer.coerce("10:30:15", time) == time(10, 30, 15)
        assert coercer.coerce("2:15 PM", time) == time(14, 15)
        assert coercer.coerce("2024-01-15T08:05:00", time) == time(8, 5)
        with pytest.raises(CoercionError, match="is not a valid Time"):
            coercer.coerce("noonish", time)

    def test_array(self, coercer):
        assert coercer.coerce("5,10,15", list) == ["5", "10", "15"]
        assert coercer.coerce("a|b", list, {"delimiter": "|"}) == ["a", "b"]
        assert coercer.coerce("a,b,,", list) == ["a", "b"]
        assert coercer.coerce("", list) == []
        assert coercer.coerce(("x", "y"), list) == ["x", "y"]

    def test_hash(self, coercer):
        result = coercer.coerce("a:1,b:2", dict)
        assert result == {"a": "1", "b": "2"}
        assert list(result) == ["a", "b"]

    def test_hash_custom_delimiter_and_separator(self, coercer):
        options = {"delimiter": ";", "separator": "="}
        assert coercer.coerce("a=1;b=2", dict, options) == {"a": "1", "b": "2"}

    def test_hash_duplicate_key_last_wins(self, coercer):
        assert coercer.coerce("a:1,b:2,a:3", dict) == {"a": "3", "b": "2"}

    def test_hash_entry_without_value_maps_to_none(self, coercer):
        assert coercer.coerce("a:1,b", dict) == {"a": "1", "b": None}
        assert coercer.coerce("a:", dict) == {"a": None}

    @pytest.mark.parametrize("raw", ["a:b:c", "a:1,,b:2"])
    def test_hash_entry_with_extra_or_missing_parts_fails(self, coercer, raw):
        with pytest.raises(CoercionError) as exc_info:
            coercer.coerce(raw, dict)
        assert str(exc_info.value) == f"'{raw}' is not a valid Hash"

    def test_unsupported_type_is_none(self, coercer):
        assert coercer.coerce("anything", bytes) is None
        assert coercer.coerce("anything", "uuid") is None

    def test_try_coerce(self, coercer):
        ok = coercer.try_coerce("3", int)
        assert ok.valid and ok.value == 3

        failed = coercer.try_coerce("three", int)
        assert not failed
        assert failed.value == "three"
        assert failed.errors == ["'three' is not a valid Integer"]

    def test_unreliable_type_check_falls_through(self, coercer):
        class Unreliable:
            @property
            def __class__(self):
                raise TypeError("no type information")

            def __str__(self):
                return "yes"

        assert coercer.coerce(Unreliable(), bool) is True

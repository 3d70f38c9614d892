"""
Canonical JSON Unit Tests
Tests for core/schemas/canonical.py and core/schemas/errors.py
"""
import pytest

from core.mmr.models import AppendResult
from core.schemas.canonical import canonicalize_value, dumps_canonical, loads_canonical
from core.schemas.errors import (
    AccumulatorError,
    CanonicalizationException,
    ErrorCodes,
    InvalidInputException,
    InvalidPositionException,
)


class TestCanonicalJson:

    def test_sorted_and_compact(self):
        assert dumps_canonical({"b": 2, "a": 1}) == '{"a":1,"b":2}'

    def test_bytes_become_hex(self):
        assert dumps_canonical({"d": b"\x01\xff"}) == '{"d":"0x01ff"}'

    def test_none_dropped(self):
        assert dumps_canonical({"a": None, "b": [None]}) == '{"b":[null]}'

    def test_model(self):
        result = AppendResult(
            leaf_index=1, element_position=1, elements_count=1,
            root_hash="0x" + "AB" * 32,
        )
        data = canonicalize_value(result)
        assert data["root_hash"] == "0x" + "ab" * 32

    def test_float_rejected(self):
        with pytest.raises(CanonicalizationException):
            dumps_canonical({"x": 1.5})

    def test_loads(self):
        assert loads_canonical('{"a":"0x01"}') == {"a": "0x01"}


class TestErrorTaxonomy:

    def test_invalid_input_is_value_error(self):
        assert issubclass(InvalidInputException, ValueError)

    def test_position_details(self):
        exc = InvalidPositionException("bad", position=9, elements_count=4)
        assert exc.code == ErrorCodes.INVALID_POSITION
        assert exc.details == {"position": 9, "elements_count": 4}

    def test_error_model_round_trip(self):
        exc = InvalidInputException("bad peaks", field_path="peaks")
        model = exc.to_error_model()
        assert isinstance(model, AccumulatorError)
        assert model.details["field_path"] == "peaks"
        assert model.to_exception().code == ErrorCodes.INVALID_INPUT

"""
Unit tests for scalar coercion of wire text into declared Python types.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import List, Optional
import pytest

from solr_mapper.domain.errors import TypeCoercionError
from solr_mapper.mapping.coercion import ScalarKind, coerce, scalar_kind_for


class Color(Enum):
    RED = "red"
    BLUE = "blue"


class TestScalarKinds:
    """Test declared type classification."""

    @pytest.mark.parametrize("declared, kind", [
        (int, ScalarKind.INTEGER),
        (str, ScalarKind.STRING),
        (bool, ScalarKind.BOOLEAN),
        (float, ScalarKind.FLOAT),
        (Decimal, ScalarKind.DECIMAL),
        (datetime, ScalarKind.TIMESTAMP),
        (Optional[datetime], ScalarKind.OPTIONAL_TIMESTAMP),
        (Color, ScalarKind.GENERIC),
    ])
    def test_kind_for_declared_type(self, declared, kind):
        assert scalar_kind_for(declared) is kind

    def test_optional_int_uses_int_converter(self):
        assert scalar_kind_for(Optional[int]) is ScalarKind.INTEGER

    def test_parameterized_container_is_not_scalar(self):
        assert scalar_kind_for(List[int]) is None

    @pytest.mark.parametrize("declared", [tuple, bytes, frozenset, Optional[tuple]])
    def test_bare_container_is_not_scalar(self, declared):
        assert scalar_kind_for(declared) is None

    def test_str_subclass_stays_generic(self):
        class Code(str):
            pass

        assert scalar_kind_for(Code) is ScalarKind.GENERIC


class TestCoerce:
    """Test conversion of single wire values."""

    def test_integer(self):
        assert coerce("123456", int) == 123456

    def test_string_kept_verbatim(self):
        assert coerce("  spaced ", str) == "  spaced "

    @pytest.mark.parametrize("text, expected", [("true", True), ("false", False), ("True", True), ("FALSE", False)])
    def test_boolean(self, text, expected):
        assert coerce(text, bool) is expected

    def test_boolean_rejects_other_text(self):
        with pytest.raises(TypeCoercionError):
            coerce("yes", bool)

    def test_float_is_locale_invariant(self):
        assert coerce("3.25", float) == 3.25
        with pytest.raises(TypeCoercionError):
            coerce("3,25", float)

    def test_decimal(self):
        assert coerce("10.50", Decimal) == Decimal("10.50")

    def test_invalid_decimal(self):
        with pytest.raises(TypeCoercionError):
            coerce("ten", Decimal)

    def test_timestamp_is_utc(self):
        value = coerce("2008-03-14T15:09:26Z", datetime)
        assert value == datetime(2008, 3, 14, 15, 9, 26, tzinfo=timezone.utc)

    def test_timestamp_requires_fixed_format(self):
        with pytest.raises(TypeCoercionError):
            coerce("2008-03-14 15:09:26", datetime)

    def test_optional_timestamp_empty_is_none(self):
        assert coerce("", Optional[datetime]) is None

    def test_optional_timestamp_with_value(self):
        value = coerce("2008-03-14T15:09:26Z", Optional[datetime])
        assert value.year == 2008

    def test_generic_conversion(self):
        assert coerce("blue", Color) is Color.BLUE

    def test_generic_conversion_failure_is_reported(self):
        with pytest.raises(TypeCoercionError) as exc_info:
            coerce("green", Color)
        assert exc_info.value.text == "green"
        assert exc_info.value.target is Color
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_invalid_integer(self):
        with pytest.raises(TypeCoercionError) as exc_info:
            coerce("12a", int)
        assert "12a" in str(exc_info.value)

    def test_container_type_is_rejected(self):
        with pytest.raises(TypeCoercionError):
            coerce("1", List[int])

    def test_bare_tuple_does_not_split_text(self):
        with pytest.raises(TypeCoercionError):
            coerce("abc", tuple)

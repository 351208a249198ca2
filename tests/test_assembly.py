"""
Unit tests for assembling arr nodes into lists, tuples and untyped lists.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence, Tuple
import pytest

from solr_mapper.domain.errors import CollectionTypeNotSupportedError, TypeCoercionError
from solr_mapper.mapping.assembly import CollectionShape, assemble, collection_spec_for


INT_CHILDREN = (("int", "1"), ("int", "2"), ("int", "3"))


class TestCollectionShapes:
    """Test declared type -> shape classification."""

    @pytest.mark.parametrize("declared", [List[int], Sequence[int], list])
    def test_list_like_types(self, declared):
        spec = collection_spec_for(declared)
        assert spec is not None
        assert spec.shape in (CollectionShape.HOMOGENEOUS, CollectionShape.UNTYPED)

    def test_homogeneous_element_type(self):
        spec = collection_spec_for(List[str])
        assert spec.shape is CollectionShape.HOMOGENEOUS
        assert spec.element_type is str

    def test_tuple_is_array(self):
        spec = collection_spec_for(Tuple[int, ...])
        assert spec.shape is CollectionShape.ARRAY
        assert spec.element_type is int

    def test_untyped(self):
        assert collection_spec_for(list).shape is CollectionShape.UNTYPED
        assert collection_spec_for(List[Any]).shape is CollectionShape.UNTYPED

    @pytest.mark.parametrize("declared", [int, str, Dict[str, int], Tuple[int, str], List[List[int]]])
    def test_unsupported(self, declared):
        assert collection_spec_for(declared) is None


class TestAssemble:
    """Test collection reconstruction from arr children."""

    def test_generic_list_of_ints_preserves_order(self):
        assert assemble(INT_CHILDREN, List[int]) == [1, 2, 3]

    def test_array_has_one_slot_per_child(self):
        value = assemble((("str", "a"), ("str", "b")), Tuple[str, ...])
        assert value == ("a", "b")

    def test_empty_array(self):
        assert assemble((), Tuple[int, ...]) == ()

    def test_untyped_uses_wire_tags(self):
        children = (
            ("int", "7"),
            ("str", "seven"),
            ("bool", "true"),
            ("date", "2008-03-14T15:09:26Z"),
        )
        assert assemble(children, list) == [
            7,
            "seven",
            True,
            datetime(2008, 3, 14, 15, 9, 26, tzinfo=timezone.utc),
        ]

    def test_unsupported_shape(self):
        with pytest.raises(CollectionTypeNotSupportedError) as exc_info:
            assemble(INT_CHILDREN, int)
        assert exc_info.value.declared_type is int
        assert exc_info.value.cause is None

    def test_element_failure_is_wrapped(self):
        with pytest.raises(CollectionTypeNotSupportedError) as exc_info:
            assemble((("str", "x"),), List[int])
        assert isinstance(exc_info.value.cause, TypeCoercionError)

    def test_unknown_tag_in_untyped_list(self):
        with pytest.raises(CollectionTypeNotSupportedError) as exc_info:
            assemble((("lst", "x"),), list)
        assert isinstance(exc_info.value.cause, KeyError)

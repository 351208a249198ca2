"""
Collection assembly for ``arr`` nodes.

Three shapes are supported, decided by the member's declared type:

- HOMOGENEOUS: ``List[T]``, ``Sequence[T]``... -> ``list`` of ``T``.
- ARRAY: ``Tuple[T, ...]`` -> fixed-length ``tuple`` of ``T``.
- UNTYPED: bare ``list`` / ``List`` / ``Sequence`` -> ``list`` whose elements
  are typed by their own wire tag.
"""
from __future__ import annotations

import collections.abc
import typing
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, get_args, get_origin

from ..domain.errors import CollectionTypeNotSupportedError, TypeCoercionError
from .coercion import coerce, scalar_kind_for, unwrap_optional

# element type by wire tag, for containers without a declared element type
TAG_TYPES: Dict[str, type] = {
    "int": int,
    "long": int,
    "str": str,
    "bool": bool,
    "date": datetime,
    "float": float,
    "double": float,
}

_SEQUENCE_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Collection,
    collections.abc.Iterable,
)

_UNTYPED = (
    list,
    typing.List,
    typing.Sequence,
    typing.Collection,
    typing.Iterable,
    collections.abc.Sequence,
    collections.abc.Collection,
    collections.abc.Iterable,
)


class CollectionShape(Enum):
    HOMOGENEOUS = "homogeneous"
    ARRAY = "array"
    UNTYPED = "untyped"


@dataclass(frozen=True)
class CollectionSpec:
    shape: CollectionShape
    element_type: Any = None


def collection_spec_for(declared_type: Any) -> Optional[CollectionSpec]:
    """Classify a declared type as one of the supported shapes, or ``None``."""
    tp, _ = unwrap_optional(declared_type)
    if tp in _UNTYPED:
        return CollectionSpec(CollectionShape.UNTYPED)
    origin, args = get_origin(tp), get_args(tp)
    if origin in _SEQUENCE_ORIGINS and len(args) == 1:
        element = args[0]
        if element is Any:
            return CollectionSpec(CollectionShape.UNTYPED)
        if _is_scalar(element):
            return CollectionSpec(CollectionShape.HOMOGENEOUS, element)
        return None
    if origin is tuple and len(args) == 2 and args[1] is Ellipsis and _is_scalar(args[0]):
        return CollectionSpec(CollectionShape.ARRAY, args[0])
    return None


def _is_scalar(tp: Any) -> bool:
    return scalar_kind_for(tp) is not None and collection_spec_for(tp) is None


def assemble(children: Sequence[Tuple[str, str]], declared_type: Any) -> Any:
    """Build the container value for an ``arr`` node.

    Args:
        children: ``(wire_tag, text)`` pairs in document order.
        declared_type: The member's declared type; decides the container shape.

    Raises:
        CollectionTypeNotSupportedError: Unsupported shape, or an element failed
            to convert (the original error is kept as ``cause``).
    """
    spec = collection_spec_for(declared_type)
    if spec is None:
        raise CollectionTypeNotSupportedError(declared_type)
    try:
        if spec.shape is CollectionShape.HOMOGENEOUS:
            return [coerce(text, spec.element_type) for _, text in children]
        if spec.shape is CollectionShape.ARRAY:
            return tuple(coerce(text, spec.element_type) for _, text in children)
        return [coerce(text, TAG_TYPES[tag]) for tag, text in children]
    except (TypeCoercionError, KeyError) as exc:
        raise CollectionTypeNotSupportedError(declared_type, exc) from exc

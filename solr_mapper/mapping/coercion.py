"""
Scalar coercion: wire text plus a declared Python type -> typed value.

The set of scalar kinds is closed; each kind has a single converter. Types
outside the named kinds go through GENERIC, which calls ``declared_type(text)``.
"""
from __future__ import annotations

import collections.abc
import types
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Union, get_args, get_origin

from ..domain.errors import TypeCoercionError
from ..domain.query import SOLR_DATE_FORMAT

_NONE_TYPE = type(None)
_UNION_TYPES = (Union, getattr(types, "UnionType", Union))


class ScalarKind(Enum):
    INTEGER = "integer"
    STRING = "string"
    BOOLEAN = "boolean"
    FLOAT = "float"
    DECIMAL = "decimal"
    TIMESTAMP = "timestamp"
    OPTIONAL_TIMESTAMP = "optional_timestamp"
    GENERIC = "generic"


def unwrap_optional(declared_type: Any) -> Tuple[Any, bool]:
    """Return ``(inner, True)`` for ``Optional[inner]``, else ``(declared_type, False)``."""
    if get_origin(declared_type) in _UNION_TYPES:
        args = [a for a in get_args(declared_type) if a is not _NONE_TYPE]
        if len(args) == 1 and len(get_args(declared_type)) == 2:
            return args[0], True
    return declared_type, False


def _to_int(text: str, _: Any) -> int:
    return int(text.strip())


def _to_str(text: str, _: Any) -> str:
    return text


def _to_bool(text: str, _: Any) -> bool:
    value = text.strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError(f"not a boolean: {text!r}")


def _to_float(text: str, _: Any) -> float:
    return float(text.strip())


def _to_decimal(text: str, _: Any) -> Decimal:
    try:
        return Decimal(text.strip())
    except InvalidOperation as exc:
        raise ValueError(f"not a decimal: {text!r}") from exc


def _to_datetime(text: str, _: Any) -> datetime:
    return datetime.strptime(text.strip(), SOLR_DATE_FORMAT).replace(tzinfo=timezone.utc)


def _to_optional_datetime(text: str, target: Any) -> Optional[datetime]:
    if not text.strip():
        return None
    return _to_datetime(text, target)


def _to_generic(text: str, target: Any) -> Any:
    return target(text)


_CONVERTERS: Dict[ScalarKind, Callable[[str, Any], Any]] = {
    ScalarKind.INTEGER: _to_int,
    ScalarKind.STRING: _to_str,
    ScalarKind.BOOLEAN: _to_bool,
    ScalarKind.FLOAT: _to_float,
    ScalarKind.DECIMAL: _to_decimal,
    ScalarKind.TIMESTAMP: _to_datetime,
    ScalarKind.OPTIONAL_TIMESTAMP: _to_optional_datetime,
    ScalarKind.GENERIC: _to_generic,
}

_KINDS_BY_TYPE: Dict[Any, ScalarKind] = {
    int: ScalarKind.INTEGER,
    str: ScalarKind.STRING,
    bool: ScalarKind.BOOLEAN,
    float: ScalarKind.FLOAT,
    Decimal: ScalarKind.DECIMAL,
    datetime: ScalarKind.TIMESTAMP,
    Any: ScalarKind.STRING,
}


def scalar_kind_for(declared_type: Any) -> Optional[ScalarKind]:
    """Classify a declared type; ``None`` when it cannot hold a scalar at all."""
    inner, optional = unwrap_optional(declared_type)
    if optional and inner is datetime:
        return ScalarKind.OPTIONAL_TIMESTAMP
    kind = _KINDS_BY_TYPE.get(inner)
    if kind is not None:
        return kind
    if get_origin(inner) is not None or not callable(inner):
        return None
    if isinstance(inner, type) and issubclass(inner, collections.abc.Iterable) and not issubclass(inner, str):
        # bare containers (tuple, bytes, ...) would split the text into items
        return None
    return ScalarKind.GENERIC


def coerce_kind(text: str, kind: ScalarKind, declared_type: Any) -> Any:
    """Convert ``text`` with the converter of an already resolved kind."""
    target, _ = unwrap_optional(declared_type)
    try:
        return _CONVERTERS[kind](text, target)
    except (TypeError, ValueError, ArithmeticError) as exc:
        raise TypeCoercionError(text, declared_type, exc) from exc


def coerce(text: str, declared_type: Any) -> Any:
    """Convert one wire value to ``declared_type``.

    Raises:
        TypeCoercionError: When the text does not parse as the declared type,
            or the type cannot hold a scalar.
    """
    kind = scalar_kind_for(declared_type)
    if kind is None:
        raise TypeCoercionError(text, declared_type)
    return coerce_kind(text, kind, declared_type)

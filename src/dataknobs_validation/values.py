"""Value kinds and field resolution.

Rules never query open-ended runtime types. Instead every value is mapped to
one of a small, closed set of kinds and rules dispatch on that kind; a kind a
rule does not support is a schema configuration error.
"""

from __future__ import annotations

import dataclasses
import logging
import numbers
import types
from collections.abc import Mapping
from enum import Enum
from typing import Any

from .exceptions import UnknownFieldError

logger = logging.getLogger(__name__)

_MISSING = object()


class ValueKind(Enum):
    """Closed set of runtime value kinds seen by rules.

    Attributes:
        INTEGER: ``int`` and other integral numbers (``bool`` excluded)
        FLOAT: other real numbers (``float``, ``Fraction``)
        STRING: ``str``
        BOOLEAN: ``bool``
        SEQUENCE: ``list`` and ``tuple`` (named tuples are records)
        RECORD: mappings, dataclass instances, named tuples, plain objects
        OTHER: anything else (``None``, bytes, sets, callables, ...)
    """

    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"
    SEQUENCE = "sequence"
    RECORD = "record"
    OTHER = "other"


NUMERIC_KINDS = frozenset({ValueKind.INTEGER, ValueKind.FLOAT})

_NOT_RECORDS = (
    type,
    types.ModuleType,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
)


def _is_named_tuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def kind_of(value: Any) -> ValueKind:
    """Classify a value into its ``ValueKind``.

    Example:
        ```python
        kind_of(True)        # ValueKind.BOOLEAN, never INTEGER
        kind_of(3)           # ValueKind.INTEGER
        kind_of([1, 2])      # ValueKind.SEQUENCE
        kind_of({"a": 1})    # ValueKind.RECORD
        ```
    """
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, numbers.Integral):
        return ValueKind.INTEGER
    if isinstance(value, numbers.Real):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if _is_named_tuple(value):
        return ValueKind.RECORD
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        return ValueKind.RECORD
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return ValueKind.RECORD
    if isinstance(value, _NOT_RECORDS) or callable(value):
        return ValueKind.OTHER
    if hasattr(value, "__dict__") or hasattr(type(value), "__slots__"):
        return ValueKind.RECORD
    return ValueKind.OTHER


def is_inspectable(value: Any) -> bool:
    """Whether a sub-schema can look up fields on ``value``."""
    return kind_of(value) is ValueKind.RECORD


def is_public(key: str) -> bool:
    """Whether a field key is part of a record's public surface."""
    return not key.startswith("_")


def resolve_field(record: Any, key: str) -> Any:
    """Look up ``key`` on ``record``.

    Mappings are indexed by key; anything else is read by attribute, which
    covers dataclasses, named tuples, properties and plain objects.

    Args:
        record: The record being validated
        key: Schema key naming the field

    Returns:
        The field's value

    Raises:
        UnknownFieldError: If the record has no such field
        AttributeError: If a declared attribute such as a property fails
    """
    if isinstance(record, Mapping):
        value = record[key] if key in record else _MISSING
    else:
        try:
            value = getattr(record, key)
        except AttributeError:
            # A declared attribute (property, slot) failing is the record's own error
            if hasattr(type(record), key) or key in getattr(record, "__dict__", {}):
                raise
            value = _MISSING

    if value is _MISSING:
        error = UnknownFieldError(key, type(record).__name__)
        logger.error(f"Schema references unknown field: {error}")
        raise error
    return value

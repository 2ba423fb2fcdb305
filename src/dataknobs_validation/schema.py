"""Schema definition and evaluation.

A ``Schema`` is a plain ``dict`` mapping field keys to chains. Evaluating it
against a record visits the keys in insertion order, resolves each field's
value from the record, runs that field's chain and stops at the first
failing rule anywhere in the schema.

Example:
    ```python
    from dataknobs_validation import Schema, field

    schema = Schema({
        "name": field("Name").string().min_length(3),
        "age": field().number().min(18),
    })

    result = schema.parse({"name": "John", "age": 17})
    result.valid     # False
    result.message   # 'age must be at least 18'

    schema.must_parse({"name": "John", "age": 30})   # returns the record
    ```

Records may be mappings (looked up by key) or objects (looked up by
attribute). A schema key missing from the record raises
``UnknownFieldError``: it means the schema and the record type have drifted
apart, not that the data is bad.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Mapping, MutableMapping
from typing import Any

from .chains import BaseChain
from .exceptions import SchemaConfigurationError, ValidationError
from .result import ValidationResult
from .rules import RunScope
from .values import resolve_field

logger = logging.getLogger(__name__)


class Schema(dict[str, BaseChain]):
    """Mapping of field keys to chains, with evaluation helpers.

    Args:
        fields: Initial key to chain mapping
        name: Optional schema name for identification and logging
    """

    def __init__(self, fields: Mapping[str, BaseChain] | None = None, name: str | None = None):
        super().__init__()
        self.name = name
        self.update(fields or {})

    def __setitem__(self, key: str, chain: BaseChain) -> None:
        if not isinstance(chain, BaseChain):
            raise SchemaConfigurationError(
                f"schema entry '{key}' must be a chain, got {type(chain).__name__}",
                context={"key": key},
            )
        super().__setitem__(key, chain)

    def update(self, other: Any = (), /, **kwargs: BaseChain) -> None:
        """Add entries through ``__setitem__`` so each one is checked."""
        items = other.items() if isinstance(other, Mapping) else other
        for key, chain in items:
            self[key] = chain
        for key, chain in kwargs.items():
            self[key] = chain

    def setdefault(self, key: str, default: Any = None) -> BaseChain:
        if key not in self:
            self[key] = default
        return self[key]

    def __repr__(self) -> str:
        return f"Schema(name={self.name!r}, fields={dict.__repr__(self)})"

    def evaluate(self, record: Any, path: str | None = None) -> ValidationError | None:
        """Run every chain of the schema against ``record``.

        This is the raw evaluator used by ``parse`` and by nested schema
        rules.

        Args:
            record: Mapping or object to validate
            path: Location of ``record`` inside an enclosing record, if any

        Returns:
            None if every chain passes, otherwise the first ValidationError

        Raises:
            SchemaConfigurationError: If the schema does not fit the record
        """
        for key, chain in self.items():
            value = resolve_field(record, key)
            scope = RunScope(
                value=value,
                context=record,
                name=chain.name or key,
                key=key,
                path=f"{path}.{key}" if path else key,
            )
            error = chain.run(scope)
            if error is not None:
                return error
        return None

    def parse(self, record: Any) -> ValidationResult:
        """Validate a record against this schema.

        Args:
            record: Mapping or object to validate

        Returns:
            ValidationResult holding the record and, on failure, the first
            ValidationError encountered

        Raises:
            SchemaConfigurationError: If the schema does not fit the record
        """
        error = self.evaluate(record)
        if error is not None:
            return ValidationResult.failure(record, error)
        return ValidationResult.success(record)

    def must_parse(self, record: Any) -> Any:
        """Same as ``parse`` but raises the ValidationError on failure.

        Returns:
            The validated record
        """
        return self.parse(record).raise_for_error()

    def unmarshal(self, data: str | bytes | bytearray, target: Any = None) -> ValidationResult:
        """Decode JSON into ``target`` and validate it.

        Args:
            data: JSON document
            target: Where to bind the decoded object: None keeps the decoded
                value, a class is instantiated from it, a mutable mapping is
                updated with it, and any other object gets the attributes it
                already has set from it

        Returns:
            ValidationResult whose value is the bound record

        Raises:
            json.JSONDecodeError: If ``data`` is not valid JSON (not wrapped)
        """
        record = _bind(json.loads(data), target)
        return self.parse(record)

    def must_unmarshal(self, data: str | bytes | bytearray, target: Any = None) -> Any:
        """Same as ``unmarshal`` but raises the ValidationError on failure.

        Returns:
            The decoded, validated record
        """
        return self.unmarshal(data, target).raise_for_error()

    def concat(self, other: Mapping[str, BaseChain]) -> Schema:
        """Merge ``other`` into this schema in place; ``other`` wins on collision.

        Returns:
            Self for chaining
        """
        for key, chain in other.items():
            if key in self:
                logger.debug(f"Overriding chain for '{key}' in schema {self.name!r}")
            self[key] = chain
        return self

    def to_dict(self) -> dict[str, Any]:
        """Describe the schema as field keys mapped to rule names."""
        return {
            "name": self.name,
            "fields": {
                key: {"label": chain.name, "rules": chain.describe()}
                for key, chain in self.items()
            },
        }


def _bind(decoded: Any, target: Any) -> Any:
    if target is None:
        return decoded
    if not isinstance(decoded, Mapping):
        raise TypeError(
            f"cannot bind decoded {type(decoded).__name__} to {target!r}"
        )
    if isinstance(target, type):
        if dataclasses.is_dataclass(target):
            names = {f.name for f in dataclasses.fields(target) if f.init}
            return target(**{k: v for k, v in decoded.items() if k in names})
        return target(**decoded)
    if isinstance(target, MutableMapping):
        target.update(decoded)
        return target
    for key, value in decoded.items():
        if hasattr(target, key):
            setattr(target, key, value)
    return target


def parse(schema: Schema, record: Any) -> ValidationResult:
    """Validate ``record`` against ``schema``. See ``Schema.parse``."""
    return schema.parse(record)


def must_parse(schema: Schema, record: Any) -> Any:
    """Validate ``record`` against ``schema``, raising on failure."""
    return schema.must_parse(record)


def unmarshal(schema: Schema, data: str | bytes | bytearray, target: Any = None) -> ValidationResult:
    """Decode JSON and validate it against ``schema``. See ``Schema.unmarshal``."""
    return schema.unmarshal(data, target)


def must_unmarshal(schema: Schema, data: str | bytes | bytearray, target: Any = None) -> Any:
    """Decode JSON and validate it against ``schema``, raising on failure."""
    return schema.must_unmarshal(data, target)


def concat(schema: Mapping[str, BaseChain], other: Mapping[str, BaseChain]) -> Schema:
    """Return a new schema holding ``schema`` overridden by ``other``."""
    name = getattr(schema, "name", None)
    return Schema(schema, name=name).concat(other)

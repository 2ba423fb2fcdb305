"""Exception hierarchy for dataknobs_validation.

Two disjoint classes of error come out of this package:

- ``ValidationError``: a record failed one of the rules of a schema. This is
  the expected, recoverable outcome and is *returned* (inside a
  ``ValidationResult``) by ``Schema.parse``; ``must_parse`` raises it.
- ``SchemaConfigurationError`` and its subclasses: the schema itself is broken
  relative to the record it was applied to (unknown field, rule applied to a
  value of the wrong kind, nested value that cannot be inspected). These are
  always raised and are never folded into a ``ValidationResult``.

Example:
    ```python
    from dataknobs_validation import Schema, field, UnknownFieldError

    schema = Schema({"nickname": field().string()})
    try:
        schema.parse({"name": "Alice"})
    except UnknownFieldError as e:
        logger.error(f"Broken schema: {e} ({e.context})")
    ```
"""

from __future__ import annotations

from typing import Any, Dict


class DataknobsError(Exception):
    """Base exception for the dataknobs_validation package.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (field names, keys, etc.)
        details: Alternative to context (both are supported for compatibility)
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        # Details takes precedence if both are provided
        self.context = details or context or {}
        self.details = self.context


class ValidationError(DataknobsError):
    """A record failed a validation rule.

    The rendered message is the whole public payload of the error; ``context``
    carries the display name of the failing field and its path when known.

    Example:
        ```python
        result = schema.parse(user)
        if not result:
            print(result.error.message)  # "Age must be at least 18"
        ```
    """

    @property
    def field(self) -> str | None:
        """Display name of the field whose rule failed, if recorded."""
        return self.context.get("field")

    @property
    def path(self) -> str | None:
        """Path of the failing value from the record root, if recorded."""
        return self.context.get("path")


class ConfigurationError(DataknobsError):
    """Raised when configuration is invalid or missing."""

    pass


class SchemaConfigurationError(ConfigurationError):
    """The schema is malformed relative to the record it validates.

    This is a programmer error: it is raised as soon as it is detected, it
    aborts the whole validation run, and the library never catches it.
    """

    pass


class UnknownFieldError(SchemaConfigurationError):
    """A schema key does not exist on the record being validated."""

    def __init__(self, key: str, record_type: str):
        self.key = key
        self.record_type = record_type
        super().__init__(
            f"field '{key}' not found in {record_type}",
            context={"key": key, "record_type": record_type},
        )


class RuleKindError(SchemaConfigurationError):
    """A rule was applied to a value of a kind it cannot handle."""

    def __init__(self, rule: str, kind: str, path: str | None = None):
        self.rule = rule
        self.kind = kind
        super().__init__(
            f"unsupported kind {kind} for {rule}()"
            + (f" at '{path}'" if path else ""),
            context={"rule": rule, "kind": kind, "path": path},
        )


class UninspectableValueError(SchemaConfigurationError):
    """A nested or element value cannot be inspected by a sub-schema."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message, context={"path": path})


__all__ = [
    "DataknobsError",
    "ValidationError",
    "ConfigurationError",
    "SchemaConfigurationError",
    "UnknownFieldError",
    "RuleKindError",
    "UninspectableValueError",
]

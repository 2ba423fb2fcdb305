"""Validation result type returned by schema evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .exceptions import ValidationError


@dataclass
class ValidationResult:
    """Outcome of applying a schema to a record.

    Evaluation stops at the first failing rule, so ``errors`` holds at most
    one ``ValidationError``. The record is always carried in ``value`` so that
    ``unmarshal`` callers get the decoded record back either way.
    """

    valid: bool
    value: Any
    errors: list[ValidationError] = field(default_factory=list)

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.valid

    @property
    def error(self) -> ValidationError | None:
        """The failure that stopped evaluation, or None when valid."""
        return self.errors[0] if self.errors else None

    @property
    def message(self) -> str | None:
        """Rendered message of the failure, or None when valid."""
        return self.errors[0].message if self.errors else None

    def raise_for_error(self) -> Any:
        """Raise the failure if there is one, otherwise return the value.

        Returns:
            The validated value

        Raises:
            ValidationError: If the result is not valid
        """
        if self.errors:
            raise self.errors[0]
        return self.value

    @classmethod
    def success(cls, value: Any) -> ValidationResult:
        """Create a successful validation result."""
        return cls(valid=True, value=value, errors=[])

    @classmethod
    def failure(cls, value: Any, error: ValidationError) -> ValidationResult:
        """Create a failed validation result.

        Args:
            value: The record that failed validation
            error: The first failure encountered

        Returns:
            Failed ValidationResult
        """
        return cls(valid=False, value=value, errors=[error])

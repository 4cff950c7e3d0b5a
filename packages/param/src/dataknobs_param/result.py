"""Result type for the accumulation path of coercion and validation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidationResult:
    """Outcome of coercing or validating one value.

    The accumulation path returns these instead of raising, so callers can
    collect every failure message for a parameter.
    """

    valid: bool
    value: Any  # The (possibly coerced) value
    errors: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.valid

    @classmethod
    def success(cls, value: Any) -> ValidationResult:
        """Create a successful result."""
        return cls(valid=True, value=value, errors=[])

    @classmethod
    def failure(cls, value: Any, errors: list[str]) -> ValidationResult:
        """Create a failed result.

        Args:
            value: The value that failed
            errors: List of error messages

        Returns:
            Failed ValidationResult
        """
        return cls(valid=False, value=value, errors=list(errors))

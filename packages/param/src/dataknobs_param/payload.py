"""Structured failure payloads handed to the host for rendering."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

FailureKey = str | tuple[str, ...]


def format_key(key: FailureKey) -> str:
    """Render a parameter name or group of names as a string key."""
    if isinstance(key, tuple):
        return ", ".join(key)
    return key


@dataclass
class ErrorPayload:
    """Failure description for a rejected request.

    Attributes:
        message: Summary message
        errors: Mapping of parameter name (or tuple of names for a group)
            to the failure detail
    """

    message: str
    errors: dict[FailureKey, Any] = field(default_factory=dict)

    @classmethod
    def for_param(cls, name: str, message: str) -> ErrorPayload:
        """Payload for a single failed parameter."""
        return cls(message=message, errors={name: message})

    @classmethod
    def for_group(cls, names: Iterable[str], message: str) -> ErrorPayload:
        """Payload for a failed cross-field check."""
        names = tuple(names)
        return cls(
            message=f"Invalid parameters [{', '.join(names)}]",
            errors={names: message},
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "message": self.message,
            "errors": {format_key(key): value for key, value in self.errors.items()},
        }

    def to_json(self) -> str:
        """Serialize to JSON text."""
        return json.dumps(self.to_dict())

    def render(self, as_json: bool = False) -> str:
        """Render as a response body: JSON text or the plain message."""
        return self.to_json() if as_json else self.message

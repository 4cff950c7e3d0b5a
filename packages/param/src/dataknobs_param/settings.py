"""Failure-mode settings for the parameter engine.

Settings are explicit values handed to each ``ParamProcessor``; nothing is
read from global state at validation time.

Environment variable format::

    DATAKNOBS_PARAM_FAILURE_MODE=accumulate
    DATAKNOBS_PARAM_PROPAGATE_ERRORS=true
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from .exceptions import SettingsError

logger = logging.getLogger(__name__)

ENV_PREFIX = "DATAKNOBS_PARAM_"


class FailureMode(Enum):
    """How the ambient ``param``/``one_of``/``any_of`` entry points report failures.

    Attributes:
        RAISE: Stop on the first failure (exception mode)
        ACCUMULATE: Collect failures and return them as data
    """

    RAISE = "raise"
    ACCUMULATE = "accumulate"

    @classmethod
    def parse(cls, value: Any) -> FailureMode:
        """Parse a mode from an enum member or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            logger.warning(f"Unknown failure mode: {value!r}")
            raise SettingsError(
                f"Invalid failure mode: {value!r}",
                context={"allowed": [mode.value for mode in cls]},
            ) from e


@dataclass(frozen=True)
class ParamSettings:
    """Settings controlling failure reporting.

    Attributes:
        failure_mode: Mode used by the ambient entry points
        propagate_errors: Let ``InvalidParameterError`` propagate to the host
            instead of converting it to a 400 payload
    """

    failure_mode: FailureMode = FailureMode.RAISE
    propagate_errors: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ParamSettings:
        """Create settings from a dictionary.

        Args:
            data: Mapping with optional ``failure_mode`` and ``propagate_errors``

        Returns:
            ParamSettings instance
        """
        failure_mode = FailureMode.parse(data.get("failure_mode", FailureMode.RAISE))
        propagate = data.get("propagate_errors", False)
        if isinstance(propagate, str):
            propagate = _parse_bool(propagate)
        return cls(failure_mode=failure_mode, propagate_errors=bool(propagate))

    @classmethod
    def from_env(
        cls,
        prefix: str = ENV_PREFIX,
        environ: Mapping[str, str] | None = None,
    ) -> ParamSettings:
        """Create settings from environment variables.

        Args:
            prefix: Environment variable prefix
            environ: Environment mapping (default: ``os.environ``)

        Returns:
            ParamSettings instance; unset variables keep their defaults
        """
        environ = os.environ if environ is None else environ
        data: dict[str, Any] = {}
        for key in ("failure_mode", "propagate_errors"):
            env_var = f"{prefix}{key.upper()}"
            if env_var in environ:
                data[key] = environ[env_var]
        if data:
            logger.info(f"Loaded param settings from environment: {sorted(data)}")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> ParamSettings:
        """Load settings from a YAML or JSON file.

        The file may hold the settings at the top level or under a ``param``
        key.

        Args:
            path: Path to a ``.yaml``, ``.yml`` or ``.json`` file

        Returns:
            ParamSettings instance

        Raises:
            SettingsError: If the file is missing or has an unsupported format
        """
        path = Path(path)
        if not path.exists():
            raise SettingsError(f"Settings file not found: {path}", context={"path": str(path)})

        suffix = path.suffix.lower()
        with open(path) as f:
            if suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f) or {}
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise SettingsError(f"Unsupported settings file format: {suffix}")

        if not isinstance(data, dict):
            raise SettingsError(f"Settings file must contain a mapping: {path}")

        logger.info(f"Loaded param settings from {path}")
        return cls.from_dict(data.get("param", data))

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to a dictionary."""
        return {
            "failure_mode": self.failure_mode.value,
            "propagate_errors": self.propagate_errors,
        }


def _parse_bool(value: str) -> bool:
    if value.strip().lower() in ["true", "yes", "1", "on"]:
        return True
    elif value.strip().lower() in ["false", "no", "0", "off", ""]:
        return False
    raise SettingsError(f"Invalid boolean setting: {value!r}")

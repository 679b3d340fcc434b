"""Generator configuration loading and validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .naming import NAMING_PRESETS, NamingConvention


class ConfigLoadError(RuntimeError):
    """Raised when a generator configuration file cannot be loaded."""


class GeneratorConfig(BaseModel):
    """Settings for one generation run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    naming_preset: Literal["pascal", "python"] = "pascal"
    naming: dict[str, Any] = Field(default_factory=dict)

    def convention(self) -> NamingConvention:
        """Return the preset convention with ``naming`` overrides applied."""
        preset = NAMING_PRESETS[self.naming_preset]
        if not self.naming:
            return preset
        return NamingConvention.model_validate({**preset.model_dump(), **self.naming})


def load_config(path: Path) -> GeneratorConfig:
    """Load and validate a generator configuration from YAML."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigLoadError(f"Failed to read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"Failed to parse YAML in {path}: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigLoadError(
            f"Config document must deserialize to a mapping, got {type(payload)!r}"
        )

    try:
        config = GeneratorConfig.model_validate(payload)
        config.convention()
    except ValidationError as exc:
        raise ConfigLoadError(f"Config validation failed for {path}: {exc}") from exc
    return config

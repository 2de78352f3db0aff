"""Command-line configuration with YAML support."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator


class MetaDBConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    db_path: str = "metadata.db"
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    def to_dict(self) -> dict[str, object]:
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "MetaDBConfig":
        return cls.model_validate(data)


def load_config(yaml_path: str | Path) -> MetaDBConfig:
    """Read a YAML mapping of MetaDBConfig fields.

    Unknown keys are rejected so a misspelt ``db_path`` cannot silently fall
    back to the default database.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a YAML mapping or holds bad values.
    """
    path = Path(yaml_path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Malformed YAML in {path}: {e}") from e

    if not isinstance(data, Mapping) or not data:
        raise ValueError(f"Empty or invalid YAML file: {path}")

    try:
        return MetaDBConfig.from_dict(data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {path}: {e}") from e


def save_config(config: MetaDBConfig, yaml_path: str | Path) -> None:
    """Save configuration to a YAML file."""
    yaml_path = Path(yaml_path)
    yaml_path.parent.mkdir(parents=True, exist_ok=True)

    with open(yaml_path, "w", encoding="utf-8") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False, indent=2)

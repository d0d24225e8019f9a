"""
Configuration loader for bountycounter.

What it does:
- Reads settings from a YAML file (`config/config.yaml` by default, or the path
  in `BOUNTYCOUNTER_CONFIG`).
- Applies `BOUNTYCOUNTER_LOGS_DIR` as an override for the logs directory.
- Validates the result with Pydantic and writes it back when API keys are added.

Where it is used:
- `bountycounter.main` (logs directory, Prometheus port, log level) and
  `bountycounter.console` (per-character EVE Workbench API keys).
"""
from __future__ import annotations

import os
import pathlib
from typing import List, Optional

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from ..errors import ConfigError

DEFAULT_CONFIG_PATH = "config/config.yaml"
DEFAULT_API_BASE_URL = "https://api.eveworkbench.com/"


class CharacterApiKey(BaseModel):
    """EVE Workbench API key registered for one character."""
    character_name: str
    character_id: int
    api_key: str

    @field_validator("character_name", "api_key")
    @classmethod
    def strip(cls, v):
        return v.strip()


class Settings(BaseModel):
    """Runtime settings loaded from YAML + environment variables."""
    logs_directory: str = ""
    api_base_url: str = DEFAULT_API_BASE_URL
    api_keys: List[CharacterApiKey] = []
    prometheus_port: Optional[int] = None
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v):
        level = str(v).strip().upper()
        if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"Unknown log level: {v}")
        return level


def config_path(path: Optional[str] = None) -> str:
    return path or os.getenv("BOUNTYCOUNTER_CONFIG", DEFAULT_CONFIG_PATH)


def load_settings(path: Optional[str] = None) -> Optional[Settings]:
    """Load settings, or None when no configuration file exists yet.

    Raises ConfigError when the file exists but cannot be parsed or validated.
    """
    p = pathlib.Path(config_path(path))
    if not p.exists():
        settings = None
    else:
        try:
            with open(p, "r") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read {p}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"{p}: expected a mapping at top level")
        try:
            settings = Settings(**raw)
        except ValidationError as e:
            raise ConfigError(f"{p}: {e}") from e
    env_dir = os.getenv("BOUNTYCOUNTER_LOGS_DIR", "")
    if env_dir:
        settings = settings or Settings()
        settings.logs_directory = env_dir
    return settings


def save_settings(settings: Settings, path: Optional[str] = None) -> None:
    p = pathlib.Path(config_path(path))
    if p.parent and not p.parent.exists():
        p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w") as f:
        yaml.safe_dump(settings.model_dump(), f, sort_keys=False)


def add_api_key(settings: Settings, character_name: str, character_id: int, api_key: str) -> Settings:
    """Insert or replace the API key for a character (matched by name)."""
    entry = CharacterApiKey(character_name=character_name, character_id=character_id, api_key=api_key)
    keys = [k for k in settings.api_keys if k.character_name != entry.character_name]
    keys.append(entry)
    settings.api_keys = keys
    return settings


def find_api_key(settings: Optional[Settings], character_name: str) -> Optional[CharacterApiKey]:
    if settings is None:
        return None
    for k in settings.api_keys:
        if k.character_name == character_name:
            return k
    return None

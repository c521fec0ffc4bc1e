"""User configuration for bucketview.

Settings live in a JSON file under the platform config directory. The
profile, bucket and bookmark names are checked with the identifier
validators before they are accepted, so a hand-edited config file cannot
smuggle an invalid name past the input forms.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from bucketview.security.validators import (
    validate_bookmark_name,
    validate_bucket_name,
    validate_profile_name,
)

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"
CONFIG_PERMISSIONS = 0o600

ENV_OVERRIDES: dict[str, str] = {
    "BUCKETVIEW_PROFILE": "profile",
    "BUCKETVIEW_BUCKET": "bucket",
    "BUCKETVIEW_DOWNLOAD_DIR": "download_dir",
}


def get_default_config_dir() -> Path:
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA") or Path.home() / "AppData" / "Roaming")
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        xdg = os.environ.get("XDG_CONFIG_HOME")
        base = Path(xdg) if xdg else Path.home() / ".config"

    config_dir = base / "bucketview"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_default_download_dir() -> Path:
    download_dir = Path.home() / "Downloads" / "bucketview"
    download_dir.mkdir(parents=True, exist_ok=True)
    return download_dir


def get_config_file_path() -> Path:
    return get_default_config_dir() / CONFIG_FILE_NAME


class Settings(BaseModel):
    download_dir: Path = Field(default_factory=get_default_download_dir)
    config_dir: Path = Field(default_factory=get_default_config_dir)
    profile: str = ""
    bucket: str = ""
    region: str = ""
    max_concurrent_downloads: int = Field(default=4, ge=1, le=20)
    bookmarks: dict[str, str] = Field(default_factory=dict)

    @field_validator("profile")
    @classmethod
    def _check_profile(cls, value: str) -> str:
        return validate_profile_name(value)

    @field_validator("bucket")
    @classmethod
    def _check_bucket(cls, value: str) -> str:
        return validate_bucket_name(value)

    @field_validator("bookmarks")
    @classmethod
    def _check_bookmarks(cls, value: dict[str, str]) -> dict[str, str]:
        for name in value:
            validate_bookmark_name(name)
        return value

    @model_validator(mode="after")
    def _expand_dirs(self) -> Settings:
        self.download_dir = self.download_dir.expanduser()
        self.config_dir = self.config_dir.expanduser()
        return self


def load_config() -> dict[str, Any]:
    """Read the config file, returning ``{}`` if it is missing or unreadable."""
    config_path = get_config_file_path()
    if not config_path.exists():
        return {}

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable config file: %s", e)
        return {}

    if not isinstance(data, dict):
        return {}

    for key in ("download_dir", "config_dir"):
        if key in data:
            data[key] = Path(data[key]).expanduser()
    return data


def save_config(settings: Settings) -> None:
    config_path = get_config_file_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    fd = os.open(config_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CONFIG_PERMISSIONS)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        json.dump(settings.model_dump(mode="json"), f, indent=2)
    # O_CREAT mode is ignored for existing files
    os.chmod(config_path, CONFIG_PERMISSIONS)


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for env_name, field_name in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is not None:
            overrides[field_name] = value
    return overrides


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first call.

    Environment overrides win over the config file. A config file that fails
    validation is ignored in favour of defaults.
    """
    global _settings
    if _settings is None:
        data = {**load_config(), **_env_overrides()}
        try:
            _settings = Settings(**data)
        except ValidationError as e:
            logger.warning("Invalid configuration, using defaults: %s", e.errors()[0]["msg"])
            _settings = Settings()
    return _settings


def update_settings(**kwargs: Any) -> Settings:
    global _settings
    current = get_settings()
    _settings = Settings(**{**current.model_dump(), **kwargs})
    return _settings


__all__ = [
    "Settings",
    "get_default_config_dir",
    "get_default_download_dir",
    "get_config_file_path",
    "load_config",
    "save_config",
    "get_settings",
    "update_settings",
]

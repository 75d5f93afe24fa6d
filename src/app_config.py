from __future__ import annotations

import os
from pathlib import Path

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli as tomllib  # type: ignore

from app_config_parser import parse_app_config
from app_config_schema import (
    DEFAULT_CONFIG_FILE,
    AppConfig,
    AppConfigurationError,
    AudioSettings,
    ClockSettings,
    HistorySettings,
    ScheduleSettings,
    UIServerSettings,
)

__all__ = [
    "AppConfig",
    "AppConfigurationError",
    "AudioSettings",
    "ClockSettings",
    "DEFAULT_CONFIG_FILE",
    "HistorySettings",
    "ScheduleSettings",
    "UIServerSettings",
    "default_app_config",
    "load_app_config",
    "resolve_config_path",
]


def resolve_config_path(config_path: str | None = None) -> Path:
    env_path = os.getenv("APP_CONFIG_FILE")
    raw = config_path or env_path or DEFAULT_CONFIG_FILE
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    return path


def load_app_config(config_path: str | None = None) -> AppConfig:
    path = resolve_config_path(config_path)
    if not path.exists():
        raise AppConfigurationError(f"Config file not found: {path}")
    if not path.is_file():
        raise AppConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except Exception as error:
        raise AppConfigurationError(f"Failed to parse config TOML: {error}") from error

    return parse_app_config(raw, base_dir=path.parent, source_file=str(path))


def default_app_config(base_dir: Path | None = None) -> AppConfig:
    """Build the all-defaults configuration used when no config file exists."""
    return parse_app_config({}, base_dir=base_dir or Path.cwd(), source_file="")

"""Persisted agent settings.

The settings live in `file_agent.ini` next to the executable:

    [Settings]
    port=8767
    token=default-token-12345

A missing file is replaced by the defaults, which are written out at once.
The loaded Config is frozen; edits only take effect after a restart.
"""
from __future__ import annotations

import configparser
import sys
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .logging_conf import get_logger

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_PORT",
    "DEFAULT_TOKEN",
    "Config",
    "default_config_path",
    "load_config",
    "save_config",
]

CONFIG_FILENAME = "file_agent.ini"
SECTION = "Settings"
DEFAULT_PORT = 8767
DEFAULT_TOKEN = "default-token-12345"

logger = get_logger("config")


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str = DEFAULT_TOKEN
    port: int = Field(DEFAULT_PORT, ge=0, le=65535)


def default_config_path() -> Path:
    """Return the settings path beside the running executable.

    For a frozen build that is the executable itself; otherwise the script
    that launched the process.
    """
    if getattr(sys, "frozen", False):
        base = Path(sys.executable).resolve().parent
    else:
        base = Path(sys.argv[0] or ".").resolve().parent
    return base / CONFIG_FILENAME


def _parse_port(raw: str | None) -> int:
    if raw is None:
        return DEFAULT_PORT
    try:
        return Config(port=int(raw.strip())).port
    except (ValueError, ValidationError):
        logger.warning(
            "config.bad_port",
            extra={"event": "config_bad_port", "value": raw, "fallback": DEFAULT_PORT},
        )
        return DEFAULT_PORT


def save_config(config: Config, path: Path | None = None) -> Path:
    """Write `config` as INI and return the path written."""
    path = path or default_config_path()
    parser = configparser.ConfigParser(interpolation=None)
    parser[SECTION] = {"port": str(config.port), "token": config.token}
    with open(path, "w", encoding="utf-8") as fh:
        # No spaces around "=", matching hand-edited files.
        parser.write(fh, space_around_delimiters=False)
    logger.info("config.saved", extra={"event": "config_saved", "path": str(path)})
    return path


def load_config(path: Path | None = None) -> Config:
    """Load settings from `path`, creating the file with defaults if absent.

    Unparsable or out-of-range ports fall back to the default port.
    """
    path = path or default_config_path()
    if not path.exists():
        logger.info("config.missing", extra={"event": "config_missing", "path": str(path)})
        config = Config()
        try:
            save_config(config, path)
        except OSError as e:
            logger.warning(
                "config.save_failed",
                extra={"event": "config_save_failed", "path": str(path), "error": str(e)},
            )
        return config

    parser = configparser.ConfigParser(interpolation=None)
    with open(path, encoding="utf-8") as fh:
        parser.read_file(fh)
    section = parser[SECTION] if parser.has_section(SECTION) else {}
    config = Config(
        token=section.get("token", DEFAULT_TOKEN),
        port=_parse_port(section.get("port")),
    )
    logger.info(
        "config.loaded",
        extra={"event": "config_loaded", "path": str(path), "port": config.port},
    )
    return config

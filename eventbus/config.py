"""Settings for the event registry, read from the environment (and .env when present)."""

import logging
import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

DEFAULT_LOG_LEVEL = logging.INFO
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Runtime knobs for a Registry."""
    log_level: int = DEFAULT_LOG_LEVEL
    isolate_errors: bool = False


def _parse_log_level(value: str | None) -> int:
    if not value:
        return DEFAULT_LOG_LEVEL
    value = value.strip()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else DEFAULT_LOG_LEVEL


def load_settings(dotenv: bool = True) -> Settings:
    """
    Build Settings from EVENTBUS_LOG_LEVEL and EVENTBUS_ISOLATE_ERRORS.
    Loads the nearest .env from the working directory first unless dotenv is False. Bad values fall back to defaults.
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))
    return Settings(
        log_level=_parse_log_level(os.environ.get("EVENTBUS_LOG_LEVEL")),
        isolate_errors=(os.environ.get("EVENTBUS_ISOLATE_ERRORS") or "").strip().lower() in _TRUTHY,
    )

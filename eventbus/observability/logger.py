"""Structured logging for registry events (subscribe, publish, delivery failures)."""

import logging
import sys
from typing import Any, MutableMapping, Tuple

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Return a configured logger for observability. Level is only applied the first time."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(level)
    return logger


class InstanceLogger(logging.LoggerAdapter):
    """
    Per-owner view of a shared logger with its own minimum level.
    The floor only filters; records still have to pass the shared logger's level.
    """

    def __init__(self, logger: logging.Logger, level: int | None = None) -> None:
        super().__init__(logger, {})
        self.floor = level

    def isEnabledFor(self, level: int) -> bool:
        if self.floor is not None and level < self.floor:
            return False
        return self.logger.isEnabledFor(level)

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        # keep the caller's extra instead of replacing it with the adapter's
        return msg, kwargs

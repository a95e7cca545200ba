"""Observability: logging and metrics for the event registry."""

from eventbus.observability.logger import InstanceLogger, get_logger
from eventbus.observability.metrics import Metrics

__all__ = ["get_logger", "InstanceLogger", "Metrics"]

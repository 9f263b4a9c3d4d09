"""Infrastructure helpers for study wizard deployments."""

from __future__ import annotations

from .logging import LOGGER, configure_logging, log_event

__all__ = ["LOGGER", "configure_logging", "log_event"]

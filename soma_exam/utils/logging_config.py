"""Logging configuration helpers for the exam client."""

from __future__ import annotations

import logging
from logging import Logger


def configure_logging(level: int = logging.INFO) -> Logger:
    """Configure basic logging for the application and return the package logger."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # uvicorn access lines would drown the exam flow messages.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    return logging.getLogger("soma_exam")

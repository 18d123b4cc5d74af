"""Logging setup shared by the Flask app, scripts and services."""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"coach_payroll.{name}")


def configure_logging(level: str | int = "INFO") -> None:
    """Attach a single stream handler to the package logger (idempotent)."""
    root = logging.getLogger("coach_payroll")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)
    if not any(getattr(h, "_coach_payroll", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._coach_payroll = True
        root.addHandler(handler)

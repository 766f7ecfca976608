"""Shared utility functions for the KarirKita project."""

import logging
import secrets
from datetime import UTC, datetime

import colorlog
from colorlog.escape_codes import escape_codes


def get_logger(name: str) -> logging.Logger:
    """Get a logger with a colorized format for the project.

    Only the top-level project logger owns handlers; ``karirkita.session`` and friends propagate to it, so a file
    handler added there receives every record.
    """
    logger = logging.getLogger(name)
    if "." in name:
        get_logger(name.split(".", 1)[0])
        return logger
    if logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_color(color: str) -> str:
    """Return the terminal escape code for a colorlog color name, or an empty string."""
    return escape_codes.get(color, "")


def new_id(prefix: str = "", length: int = 9) -> str:
    """Generate a short random lowercase identifier, optionally prefixed (e.g. ``job-3k9x0a1bq``)."""
    alphabet = "abcdefghijklmnopqrstuvwxyz0123456789"
    token = "".join(secrets.choice(alphabet) for _ in range(length))
    return f"{prefix}-{token}" if prefix else token


def utcnow_iso() -> str:
    """Get the current UTC time as an ISO8601 string."""
    return datetime.now(UTC).isoformat()

from __future__ import annotations

import logging
import os
import sys
from typing import Any

from loguru import logger

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

# Stdlib loggers routed into loguru. Chatty transport loggers stay at WARNING.
_ROUTED = ("uvicorn", "uvicorn.error", "fastapi")
_QUIET = ("uvicorn.access", "httpx", "httpcore", "google_genai")

_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[origin]}</cyan> | "
    "<level>{message}</level>"
)


def _origin(record: dict[str, Any]) -> None:
    extra = record["extra"]
    module = str(extra.get("stdlib_name") or record["name"] or "-").rsplit(".", 1)[-1]
    line = extra.get("stdlib_line") or record["line"]
    extra["origin"] = f"{module}:{line}"


class InterceptHandler(logging.Handler):
    """Forward stdlib records to loguru, keeping the caller's module and line."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.bind(stdlib_name=record.name, stdlib_line=record.lineno).opt(exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(default_level: str = "INFO") -> str:
    """
    Send all application logs through one loguru sink on stderr.

    The level comes from RTP_LOG_LEVEL, then `default_level`, then INFO.
    Returns the level in effect.
    """
    level = (os.getenv("RTP_LOG_LEVEL") or default_level or "INFO").strip().upper()
    if level not in LOG_LEVELS:
        level = "INFO"

    logger.remove()
    logger.configure(patcher=_origin)
    logger.add(sys.stderr, level=level, format=_FORMAT, backtrace=False, diagnose=False)

    stdlib_level = {"TRACE": logging.DEBUG, "SUCCESS": logging.INFO}.get(level) or logging.getLevelName(level)
    logging.basicConfig(handlers=[InterceptHandler()], level=stdlib_level, force=True)
    for name in _ROUTED + _QUIET:
        routed = logging.getLogger(name)
        routed.handlers = [InterceptHandler()]
        routed.propagate = False
        routed.setLevel(logging.WARNING if name in _QUIET else stdlib_level)
    return level


def _field(value: Any) -> str:
    if value is None:
        return "None"
    if not isinstance(value, str):
        return str(value)
    text = value.replace("\n", "\\n")
    if text and not any(ch in text for ch in " |'"):
        return text
    return "'" + text.replace("'", "\\'") + "'"


def log_event(event: str, **fields: Any) -> str:
    """`log_event("store.insert", table="recipes")` -> `evt=store.insert | table=recipes`."""
    return " | ".join([f"evt={event}", *(f"{key}={_field(value)}" for key, value in fields.items())])

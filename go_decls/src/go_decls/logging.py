"""Logging configuration using Loguru.

stdout belongs to the JSON record, so every handler here writes to stderr or
to a file. Settings come from the environment (see config.py).

Usage:
    from go_decls.src.go_decls.logging import logger
    logger.debug("Parsed {path}", path=path)
"""

import json
import sys
from typing import Optional

from loguru import logger

from go_decls.src.go_decls.config import Settings

# Pino-compatible numeric levels for the NDJSON sinks
PINO_LEVELS = {
    "TRACE": 10,
    "DEBUG": 20,
    "INFO": 30,
    "WARNING": 40,
    "ERROR": 50,
    "CRITICAL": 60,
}

_human_format = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}:{function}:{line}</cyan> - "
    "<level>{message}</level>"
)


def _to_ndjson(record) -> str:
    entry = {
        "level": PINO_LEVELS.get(record["level"].name, 30),
        "time": int(record["time"].timestamp() * 1000),
        "msg": record["message"],
        "pid": record["process"].id,
    }
    for key, value in record["extra"].items():
        entry[key] = value
    if record["exception"]:
        entry["err"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else "Error",
            "message": str(record["exception"].value) if record["exception"].value else "",
        }
    return json.dumps(entry, default=str)


def _stderr_ndjson_sink(message):
    # Never call logger.* inside a sink - causes infinite recursion
    sys.stderr.write(_to_ndjson(message.record) + "\n")
    sys.stderr.flush()


def configure_logging(settings: Optional[Settings] = None) -> Settings:
    """(Re)install handlers according to settings; returns the settings used."""
    settings = settings or Settings.from_env()

    logger.remove()

    if settings.log_json:
        logger.add(_stderr_ndjson_sink, level=settings.log_level, colorize=False)
    else:
        logger.add(
            sys.stderr,
            level=settings.log_level,
            format=_human_format,
            colorize=None,  # Auto-detect: colors if TTY, plain if piped
        )

    if settings.log_file:
        log_file = settings.log_file

        def _file_sink(message):
            with open(log_file, "a", encoding="utf-8") as f:
                f.write(_to_ndjson(message.record) + "\n")

        logger.add(_file_sink, level="DEBUG")  # File always captures everything

    return settings


configure_logging()

__all__ = ["logger", "configure_logging"]

"""Relay configuration and logging setup.

Resolution order for every setting:
1. Explicit value (CLI option)
2. Environment variable (``PIPERELAY_*``)
3. Built-in default
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .copier import DEFAULT_BUFFER_SIZE

ENV_BUFFER_SIZE = "PIPERELAY_BUFFER_SIZE"
ENV_LOG_LEVEL = "PIPERELAY_LOG_LEVEL"
ENV_LOG_FILE = "PIPERELAY_LOG_FILE"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "piperelay: %(levelname)s [%(threadName)s] %(message)s"


class RelayConfig(BaseModel):
    """Settings for one relay run."""

    model_config = ConfigDict(frozen=True)

    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, gt=0)
    log_level: str = "WARNING"
    log_file: Optional[Path] = None

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {v!r} (expected one of {', '.join(LOG_LEVELS)})")
        return level


def resolve_config(
    buffer_size: Optional[int] = None,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> RelayConfig:
    """Merge explicit values, environment and defaults into a RelayConfig.

    Raises:
        pydantic.ValidationError: If a resolved value is invalid
    """
    env = os.environ if environ is None else environ

    values: dict = {}
    if buffer_size is not None:
        values["buffer_size"] = buffer_size
    elif env.get(ENV_BUFFER_SIZE):
        values["buffer_size"] = env[ENV_BUFFER_SIZE]

    if log_level is not None:
        values["log_level"] = log_level
    elif env.get(ENV_LOG_LEVEL):
        values["log_level"] = env[ENV_LOG_LEVEL]

    if log_file is not None:
        values["log_file"] = log_file
    elif env.get(ENV_LOG_FILE):
        values["log_file"] = env[ENV_LOG_FILE]

    return RelayConfig(**values)


def configure_logging(level: str, log_file: Optional[Path] = None) -> logging.Logger:
    """Install the single handler of the ``piperelay`` logger.

    Logging goes to stderr unless ``log_file`` is given, which keeps
    diagnostics out of the relayed error stream.
    """
    logger = logging.getLogger("piperelay")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file is not None:
        handler: logging.Handler = logging.FileHandler(log_file, mode="a")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


__all__ = [
    "ENV_BUFFER_SIZE",
    "ENV_LOG_FILE",
    "ENV_LOG_LEVEL",
    "RelayConfig",
    "configure_logging",
    "resolve_config",
]

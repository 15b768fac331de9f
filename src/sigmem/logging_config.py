"""Centralized logging configuration."""

from __future__ import annotations

import logging
import sys

from sigmem.config import Config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(config: Config | None = None) -> None:
    """Configure the root logger from ``config.log_level``."""
    config = config or Config()
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )

"""Logging configuration for the service and the CLI."""

from __future__ import annotations

import sys

from loguru import logger

from minhland_ads.config import AdsConfig

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
LOG_ROTATION = "10 MB"
LOG_RETENTION = "7 days"


def configure_logging(cfg: AdsConfig) -> list[int]:
    """Replace the default sink with a stderr sink and an optional file sink.

    Returns the ids of the installed sinks.
    """
    logger.remove()
    sinks = [logger.add(sys.stderr, level=cfg.log_level, format=LOG_FORMAT)]
    if cfg.log_file:
        sinks.append(logger.add(
            cfg.log_file,
            level=cfg.log_level,
            rotation=LOG_ROTATION,
            retention=LOG_RETENTION,
            encoding="utf-8",
            enqueue=True,
        ))
    logger.debug("Logging configured at {} (live_mode={})", cfg.log_level, cfg.live_mode)
    return sinks

"""Tests for logging configuration."""

from loguru import logger

from minhland_ads.config import AdsConfig
from minhland_ads.logging_setup import configure_logging


def test_file_sink_written(tmp_path):
    log_file = tmp_path / "ads.log"
    sinks = configure_logging(AdsConfig(log_level="INFO", log_file=str(log_file)))
    try:
        assert len(sinks) == 2
        logger.info("published ad {}", "AD-1")
        logger.complete()
    finally:
        for sink in sinks:
            logger.remove(sink)
    assert "published ad AD-1" in log_file.read_text(encoding="utf-8")


def test_stderr_only_by_default():
    sinks = configure_logging(AdsConfig())
    try:
        assert len(sinks) == 1
    finally:
        for sink in sinks:
            logger.remove(sink)

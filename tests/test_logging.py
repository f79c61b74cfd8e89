"""Tests for logging setup."""

import logging

import pytest

from backoff_retry.logging import RETRY_LOGGER, configure_logging


@pytest.fixture
def restore_retry_logger():
    logger = logging.getLogger(RETRY_LOGGER)
    level = logger.level
    yield logger
    logger.setLevel(level)


def test_retry_log_level_applies_to_retry_logger(monkeypatch, restore_retry_logger):
    monkeypatch.setenv("RETRY_LOG_LEVEL", "error")
    configure_logging()
    assert restore_retry_logger.level == logging.ERROR


def test_retry_logger_untouched_without_override(monkeypatch, restore_retry_logger):
    monkeypatch.delenv("RETRY_LOG_LEVEL", raising=False)
    restore_retry_logger.setLevel(logging.NOTSET)
    configure_logging()
    assert restore_retry_logger.level == logging.NOTSET


def test_explicit_retry_level_overrides_env(monkeypatch, restore_retry_logger):
    monkeypatch.setenv("RETRY_LOG_LEVEL", "DEBUG")
    configure_logging("INFO", "critical")
    assert restore_retry_logger.level == logging.CRITICAL


def test_unknown_retry_level_falls_back_to_warning(monkeypatch, restore_retry_logger):
    monkeypatch.delenv("RETRY_LOG_LEVEL", raising=False)
    configure_logging(retry_level="chatty")
    assert restore_retry_logger.level == logging.WARNING

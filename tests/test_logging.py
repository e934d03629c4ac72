"""로깅 설정 테스트."""

import logging

from hashkorea.core.logger import get_logger, resolve_log_level
from hashkorea.core.logging_config import build_logging_config


def test_resolve_log_level_normalizes_case(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert resolve_log_level() == "DEBUG"
    assert resolve_log_level("warning") == "WARNING"


def test_invalid_log_level_falls_back_to_info(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "verbose")

    assert resolve_log_level() == "INFO"
    assert build_logging_config()["root"]["level"] == "INFO"

    logger = get_logger("hashkorea.tests.invalid_level")
    assert logger.level == logging.INFO


def test_logging_config_applies_level_to_uvicorn_loggers() -> None:
    config = build_logging_config("error")

    assert config["root"]["level"] == "ERROR"
    assert config["loggers"]["uvicorn.access"]["level"] == "ERROR"

"""표준화된 로거 모듈.

프로젝트 전체에서 일관된 로깅 형식을 제공합니다.
"""

import logging
import os
import sys

_DEFAULT_LOG_LEVEL = "INFO"


def resolve_log_level(level: str | None = None) -> str:
    """인자 또는 LOG_LEVEL 환경변수에서 로그 레벨을 결정합니다. 알 수 없는 값은 INFO로 대체합니다."""
    name = (level or os.getenv("LOG_LEVEL") or _DEFAULT_LOG_LEVEL).strip().upper()
    if isinstance(logging.getLevelName(name), int):
        return name
    return _DEFAULT_LOG_LEVEL


def get_logger(name: str) -> logging.Logger:
    """표준화된 로거를 반환합니다.

    모듈 로거는 자체 stdout 핸들러로 출력하고 루트 로거로 전파하지 않습니다.
    루트(uvicorn) 핸들러와 중복 출력되지 않게 하기 위함입니다.

    Args:
        name: 로거 이름 (일반적으로 __name__ 사용).

    Returns:
        설정된 로거 인스턴스.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        level = resolve_log_level()
        logger.setLevel(level)

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)

        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False

    return logger

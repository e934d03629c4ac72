"""외부 호출 타임아웃 정책.

LLM 판정과 장소 검색은 한 번만 호출하므로, 각 호출의 타임아웃이
API 요청 전체 타임아웃을 넘지 않도록 맞춘다.
"""

from __future__ import annotations

from dataclasses import dataclass

from hashkorea.core.config import Settings, get_settings

_CONNECT_SHARE = 0.3
_CONNECT_CAP_SECONDS = 5.0


def _seconds(value: object, fallback: int) -> int:
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        return fallback


@dataclass(frozen=True, slots=True)
class TimeoutPolicy:
    """요청 전체 타임아웃과 외부 호출별 타임아웃(초)."""

    request_timeout_seconds: int
    llm_timeout_seconds: int
    google_places_timeout_seconds: int


def build_timeout_policy(settings: Settings) -> TimeoutPolicy:
    request_timeout = _seconds(settings.REQUEST_TIMEOUT_SECONDS, 60)
    return TimeoutPolicy(
        request_timeout_seconds=request_timeout,
        llm_timeout_seconds=min(request_timeout, _seconds(settings.LLM_TIMEOUT_SECONDS, 30)),
        google_places_timeout_seconds=min(request_timeout, _seconds(settings.GOOGLE_PLACES_TIMEOUT_SECONDS, 10)),
    )


def get_timeout_policy(settings: Settings | None = None) -> TimeoutPolicy:
    return build_timeout_policy(settings or get_settings())


def to_requests_timeout(total_seconds: int) -> tuple[float, float]:
    """전체 타임아웃을 requests의 (connect, read) 튜플로 나눕니다.

    연결에는 전체의 30%를 1~5초 범위에서 배정하고 나머지를 읽기에 쓴다.
    """
    total = float(max(1, int(total_seconds)))
    connect = min(_CONNECT_CAP_SECONDS, max(1.0, total * _CONNECT_SHARE))
    read = max(1.0, total - connect) if total > connect else total * 0.5
    return connect, read

"""`/health/ready`용 외부 의존성 점검.

OpenAI는 필수 의존성이고 Google Places는 선택 의존성이다. 자격 증명이
있으면 443 포트 TCP 연결까지만 확인하며 실제 API는 호출하지 않는다.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from hashkorea.core.config import get_settings
from hashkorea.core.timeout_policy import get_timeout_policy

ReadinessCheck = dict[str, str | bool]


@dataclass(frozen=True)
class _Dependency:
    name: str
    label: str
    host: str
    env_key: str
    credential: str | None
    required: bool
    timeout_seconds: int


def _result(status: str, detail: str, *, required: bool) -> ReadinessCheck:
    return {"status": status, "ok": status != "fail", "required": required, "detail": detail}


async def _check_tcp_connectivity(host: str, port: int, timeout_seconds: int, label: str) -> ReadinessCheck:
    try:
        _, writer = await asyncio.wait_for(asyncio.open_connection(host, port), timeout=timeout_seconds)
    except (TimeoutError, OSError) as exc:
        return _result("fail", f"{label} 연결 실패 ({host}:{port}): {exc!r}", required=True)

    writer.close()
    await writer.wait_closed()
    return _result("ok", f"{label} 연결 가능 ({host}:{port})", required=True)


async def _check_dependency(dependency: _Dependency) -> ReadinessCheck:
    if dependency.credential:
        result = await _check_tcp_connectivity(
            dependency.host,
            443,
            dependency.timeout_seconds,
            dependency.label,
        )
        return {**result, "required": dependency.required}

    detail = f"{dependency.env_key}가 설정되지 않았습니다."
    if dependency.required:
        return _result("fail", detail, required=True)
    return _result("skip", f"{detail} {dependency.label} 체크를 건너뜁니다.", required=False)


async def collect_readiness_status() -> dict[str, object]:
    """의존성별 점검 결과와 전체 준비 상태를 반환합니다."""
    settings = get_settings()
    policy = get_timeout_policy(settings)
    dependencies = [
        _Dependency(
            name="openai",
            label="OpenAI API",
            host="api.openai.com",
            env_key="OPENAI_API_KEY",
            credential=settings.OPENAI_API_KEY,
            required=True,
            timeout_seconds=policy.llm_timeout_seconds,
        ),
        _Dependency(
            name="google_places",
            label="Google Places API",
            host="places.googleapis.com",
            env_key="GOOGLE_PLACES_API_KEY",
            credential=settings.GOOGLE_PLACES_API_KEY,
            required=False,
            timeout_seconds=policy.google_places_timeout_seconds,
        ),
    ]

    results = await asyncio.gather(*(_check_dependency(dependency) for dependency in dependencies))
    checks = {dependency.name: result for dependency, result in zip(dependencies, results)}
    ready = all(result["ok"] for result in checks.values() if result["required"])
    return {"status": "ready" if ready else "not_ready", "checks": checks}

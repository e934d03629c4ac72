"""턴 판정용 LLM 클라이언트 관리."""

from __future__ import annotations

from functools import lru_cache
from time import perf_counter
from typing import Any

from langchain_openai import ChatOpenAI

from hashkorea.core.config import Settings, get_settings
from hashkorea.core.errors import LLMNotConfiguredError, UpstreamServiceError
from hashkorea.core.logger import get_logger
from hashkorea.core.timeout_policy import get_timeout_policy

logger = get_logger(__name__)


@lru_cache(maxsize=16)
def _get_chat_openai_client(
    model: str,
    temperature: float,
    timeout_seconds: int,
    api_key: str,
) -> ChatOpenAI:
    return ChatOpenAI(
        model=model,
        temperature=temperature,
        api_key=api_key,
        request_timeout=timeout_seconds,
        max_retries=0,
    )


def get_llm(settings: Settings | None = None) -> ChatOpenAI:
    """ChatOpenAI 인스턴스를 반환합니다.

    Raises:
        LLMNotConfiguredError: OPENAI_API_KEY가 없는 경우.
    """
    resolved_settings = settings or get_settings()
    if not resolved_settings.OPENAI_API_KEY:
        raise LLMNotConfiguredError("OPENAI_API_KEY가 설정되지 않아 대화 기능을 사용할 수 없습니다.")

    return _get_chat_openai_client(
        resolved_settings.LLM_MODEL_NAME.strip(),
        float(resolved_settings.LLM_TEMPERATURE),
        get_timeout_policy(resolved_settings).llm_timeout_seconds,
        resolved_settings.OPENAI_API_KEY,
    )


async def ainvoke_text(payload: Any, *, llm: Any | None = None) -> str:
    """LLM을 한 번 호출하고 응답 텍스트를 반환합니다. 재시도하지 않습니다."""
    client = llm if llm is not None else get_llm()
    model_name = getattr(client, "model_name", None) or type(client).__name__

    started = perf_counter()
    try:
        response = await client.ainvoke(payload)
    except Exception as exc:
        logger.warning(
            "LLM call failed: model=%s latency_ms=%.1f",
            model_name,
            (perf_counter() - started) * 1000,
            exc_info=exc,
        )
        raise UpstreamServiceError("LLM 호출에 실패했습니다.") from exc

    logger.info("LLM call succeeded: model=%s latency_ms=%.1f", model_name, (perf_counter() - started) * 1000)
    content = getattr(response, "content", response)
    if isinstance(content, list):
        content = "".join(part.get("text", "") if isinstance(part, dict) else str(part) for part in content)
    return str(content or "")

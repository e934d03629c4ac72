"""LLM 턴 판정 노드."""

from __future__ import annotations

from langchain_core.runnables import RunnableConfig

from hashkorea.core.errors import TurnParseError, UpstreamServiceError
from hashkorea.core.logger import get_logger
from hashkorea.graph.turn.state import TurnState
from hashkorea.schemas.chat import CollectedInfo, Message
from hashkorea.services.turn_processor import process_turn

logger = get_logger(__name__)

GENERIC_PROCESSING_ERROR = "요청을 처리하는 중 문제가 발생했습니다. 다시 말씀해 주시겠어요?"


async def judge_turn(state: TurnState, config: RunnableConfig) -> TurnState:
    """사용자 발화를 턴 처리기로 판정하고 결과를 상태에 반영합니다."""
    user_query = (state.get("user_query") or "").strip()
    if not user_query:
        return {**state, "turn": None, "error": "메시지 내용이 비어 있습니다."}

    llm = config.get("configurable", {}).get("llm")
    history = [Message.model_validate(item) for item in state.get("history", [])]

    try:
        result = await process_turn(
            user_query,
            CollectedInfo.model_validate(state.get("collected_info") or {}),
            history=history,
            locale=state.get("locale"),
            llm=llm,
        )
    except TurnParseError:
        return {**state, "turn": None, "error": GENERIC_PROCESSING_ERROR}
    except UpstreamServiceError as exc:
        logger.error("턴 판정 실패: %s", exc)
        return {**state, "turn": None, "error": str(exc)}

    return {**state, "turn": result.model_dump(mode="json"), "error": None}

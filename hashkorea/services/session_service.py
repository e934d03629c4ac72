"""세션 단위 대화 턴 처리 서비스."""

from __future__ import annotations

import asyncio
from typing import Any

from hashkorea.conversation.session import ChatSession
from hashkorea.core.config import get_settings
from hashkorea.core.logger import get_logger
from hashkorea.graph.turn import compiled_turn_graph
from hashkorea.graph.turn.nodes.respond import format_error_message
from hashkorea.schemas.chat import CollectedInfo
from hashkorea.schemas.enums import ResponseType, Sender
from hashkorea.schemas.place import Place
from hashkorea.schemas.session import TurnOutcome
from hashkorea.services.places_service import PlacesServiceProtocol

logger = get_logger(__name__)

UNEXPECTED_TURN_ERROR = "대화 처리 중 내부 오류가 발생했습니다."


async def run_turn_pipeline(
    session: ChatSession,
    text: str,
    *,
    places_service: PlacesServiceProtocol | None = None,
    llm: Any | None = None,
    locale: str | None = None,
) -> dict:
    """턴 그래프를 실행하고 최종 상태를 반환합니다."""
    history_limit = get_settings().CHAT_HISTORY_LIMIT
    # 방금 추가한 사용자 메시지는 history가 아니라 user_query로 전달한다.
    history = session.recent_history(history_limit + 1)[:-1]

    initial_state = {
        "user_query": text,
        "collected_info": session.collected_info.model_dump(),
        "history": [message.model_dump() for message in history],
        "locale": locale,
    }
    return await compiled_turn_graph.ainvoke(
        initial_state,
        config={"configurable": {"places_service": places_service, "llm": llm}},
    )


async def handle_user_message(
    session: ChatSession,
    text: str,
    *,
    places_service: PlacesServiceProtocol | None = None,
    llm: Any | None = None,
    locale: str | None = None,
) -> TurnOutcome:
    """사용자 메시지 하나를 세션에 반영하고 응답 메시지를 추가합니다.

    실패는 이번 턴에만 영향을 주며, 수집 정보는 되돌리지 않는다.

    Raises:
        SessionBusyError: 같은 세션의 이전 턴이 아직 처리 중인 경우.
    """
    with session.turn():
        user_message = session.add_message(Sender.USER, text)

        try:
            result = await run_turn_pipeline(
                session,
                text,
                places_service=places_service,
                llm=llm,
                locale=locale,
            )
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("턴 그래프 실행 중 예외 발생: session=%s", session.id)
            result = {
                "turn": None,
                "error": UNEXPECTED_TURN_ERROR,
                "assistant_messages": [format_error_message(UNEXPECTED_TURN_ERROR)],
            }

        turn = result.get("turn")
        turn_type = ResponseType(turn["type"]) if turn else None
        if turn:
            session.update_collected_info(CollectedInfo.model_validate(turn["collected_info"]))

        places: list[Place] = []
        if turn_type == ResponseType.RECOMMENDATION and not result.get("error"):
            places = [Place.model_validate(item) for item in result.get("places", [])]
            session.set_places(places)

        assistant_messages = [
            session.add_message(Sender.ASSISTANT, message) for message in result.get("assistant_messages", [])
        ]

    logger.info(
        "Session turn completed: session=%s type=%s places=%d error=%s",
        session.id,
        turn_type.value if turn_type else None,
        len(places),
        bool(result.get("error")),
    )
    return TurnOutcome(
        type=turn_type,
        messages=[user_message, *assistant_messages],
        collected_info=session.collected_info,
        places=places,
        error=result.get("error"),
    )

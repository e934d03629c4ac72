"""턴 응답 메시지 구성 노드."""

from __future__ import annotations

from hashkorea.graph.turn.state import TurnState
from hashkorea.schemas.enums import ResponseType
from hashkorea.schemas.place import Place
from hashkorea.services.search_service import format_search_results


def format_error_message(detail: str) -> str:
    return f"죄송합니다. 오류가 발생했습니다: {detail}"


def respond(state: TurnState) -> TurnState:
    """판정 메시지, 검색 결과, 오류를 대화 메시지 목록으로 정리합니다."""
    turn = state.get("turn")
    messages: list[str] = []

    if turn and turn.get("message"):
        messages.append(turn["message"])

    if error := state.get("error"):
        messages.append(format_error_message(error))
    elif turn and turn.get("type") == ResponseType.RECOMMENDATION.value:
        places = [Place.model_validate(item) for item in state.get("places", [])]
        messages.append(format_search_results(places))

    return {**state, "assistant_messages": messages}

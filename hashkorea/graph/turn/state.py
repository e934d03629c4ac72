"""대화 턴 그래프 상태 정의."""

from typing import TypedDict


class TurnState(TypedDict, total=False):
    """대화 턴 그래프 상태.

    Keys:
        user_query: 이번 턴의 사용자 발화
        collected_info: 턴 시작 시점의 수집 정보
        history: 최근 대화 맥락 (role/content)
        locale: 응답 언어 코드
        turn: 턴 처리기 결과 (ChatResponse 덤프)
        query: 실제 실행한 장소 검색어
        places: 지도 마커 목록 (Place 덤프)
        assistant_messages: 대화 기록에 추가할 어시스턴트 메시지
        error: 사용자에게 보여줄 오류 메시지
    """

    # Input
    user_query: str
    collected_info: dict
    history: list[dict]
    locale: str | None

    # Processing
    turn: dict | None
    query: str
    places: list[dict]

    # Output
    assistant_messages: list[str]
    error: str | None

"""대화 세션 API.

세션은 메모리에만 보관되며 서버 재시작 시 사라집니다.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from hashkorea.api.dependencies import get_places_service, get_session, get_session_store, get_turn_llm
from hashkorea.conversation.session import ChatSession, SessionBusyError, SessionStore
from hashkorea.core.logger import get_logger
from hashkorea.schemas.session import SendMessageRequest, SessionResponse, TurnOutcome
from hashkorea.services.places_service import PlacesServiceProtocol
from hashkorea.services.session_service import handle_user_message

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])
logger = get_logger(__name__)


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_session(
    locale: str | None = None,
    store: SessionStore = Depends(get_session_store),  # noqa: B008
) -> SessionResponse:
    """인사 메시지가 담긴 새 세션을 생성합니다. 인사는 `locale` 언어로 작성됩니다."""
    session = store.create(locale)
    logger.info("Session created: %s locale=%s", session.id, session.locale)
    return session.to_response()


@router.get("/{session_id}", response_model=SessionResponse)
def read_session(session: ChatSession = Depends(get_session)) -> SessionResponse:  # noqa: B008
    """세션의 대화 기록과 수집 정보를 반환합니다."""
    return session.to_response()


@router.post(
    "/{session_id}/messages",
    response_model=TurnOutcome,
    responses={409: {"description": "이전 턴 처리 중"}},
)
async def send_message(
    request: SendMessageRequest,
    session: ChatSession = Depends(get_session),  # noqa: B008
    places_service: PlacesServiceProtocol | None = Depends(get_places_service),  # noqa: B008
    llm: Any = Depends(get_turn_llm),  # noqa: B008
) -> TurnOutcome:
    """사용자 메시지 한 턴을 처리합니다. 오류는 대화 메시지로 기록됩니다."""
    if not request.text.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="메시지 내용이 비어 있습니다.")

    try:
        return await handle_user_message(
            session,
            request.text.strip(),
            places_service=places_service,
            llm=llm,
            locale=request.locale or session.locale,
        )
    except SessionBusyError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.delete("/{session_id}/messages", response_model=SessionResponse)
def clear_messages(session: ChatSession = Depends(get_session)) -> SessionResponse:  # noqa: B008
    """대화 기록과 수집 정보를 초기화하고 인사 메시지를 다시 추가합니다."""
    if session.is_loading:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="이전 요청을 처리하는 중입니다.")
    session.clear()
    session.initialize()
    return session.to_response()


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)) -> None:  # noqa: B008
    """세션을 삭제합니다."""
    if not store.delete(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="세션을 찾을 수 없습니다.")

"""API 의존성 모음."""

from typing import Any

from fastapi import Depends, HTTPException, Request, status

from hashkorea.conversation.session import ChatSession, SessionStore
from hashkorea.core.logger import get_logger
from hashkorea.services.google_places_service import GooglePlacesNotConfiguredError, get_google_places_service
from hashkorea.services.places_service import PlacesServiceProtocol

logger = get_logger(__name__)


def get_session_store(request: Request) -> SessionStore:
    """앱 인스턴스가 소유한 세션 저장소를 제공합니다."""
    return request.app.state.session_store


def get_session(session_id: str, store: SessionStore = Depends(get_session_store)) -> ChatSession:  # noqa: B008
    """경로의 세션 ID로 세션을 조회합니다."""
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="세션을 찾을 수 없습니다.")
    return session


def get_places_service() -> PlacesServiceProtocol | None:
    """Places 서비스를 제공합니다. API 키가 없으면 None을 반환합니다."""
    try:
        return get_google_places_service()
    except GooglePlacesNotConfiguredError:
        logger.warning("GOOGLE_PLACES_API_KEY 미설정으로 장소 검색을 사용할 수 없습니다.")
        return None


def get_turn_llm() -> Any | None:
    """턴 판정 LLM을 제공합니다. None이면 설정 기반 기본 클라이언트를 사용합니다."""
    return None

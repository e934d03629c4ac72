"""대화 세션 상태 저장소.

세션은 대화 기록, 수집 정보, 최근 검색 결과를 메모리에만 보관합니다.
세션 객체는 턴 처리기에 참조로 전달되며, 저장소는 앱 인스턴스가 소유합니다.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from uuid import uuid4

from hashkorea.core.config import DEFAULT_LOCALE, resolve_locale
from hashkorea.core.errors import HashKoreaError
from hashkorea.core.logger import get_logger
from hashkorea.schemas.chat import CollectedInfo, Message
from hashkorea.schemas.enums import Sender
from hashkorea.schemas.place import Place
from hashkorea.schemas.session import ChatMessage, SessionResponse

logger = get_logger(__name__)

GREETING_MESSAGES: dict[str, str] = {
    "en": "Hello! I am Hash Korea AI Assistant. What kind of place are you looking for?",
    "ko": "안녕하세요! Hash Korea AI 어시스턴트입니다. 어떤 장소를 찾고 계신가요?",
    "ja": "こんにちは！Hash Korea AIアシスタントです。どんな場所をお探しですか？",
    "zh": "你好！我是 Hash Korea AI 助手。您在寻找什么样的地方？",
}


def greeting_for(locale: str | None) -> str:
    """언어 코드에 맞는 인사 메시지를 반환합니다."""
    return GREETING_MESSAGES.get(resolve_locale(locale), GREETING_MESSAGES[DEFAULT_LOCALE])


class SessionBusyError(HashKoreaError):
    """이전 턴이 아직 처리 중인 세션에 새 메시지가 들어왔을 때 발생합니다."""


class ChatSession:
    """단일 대화 세션 상태."""

    def __init__(self, session_id: str | None = None, locale: str | None = None) -> None:
        self.id = session_id or uuid4().hex
        self.locale = resolve_locale(locale)
        self.messages: list[ChatMessage] = []
        self.collected_info = CollectedInfo()
        self.places: list[Place] = []
        self.is_loading = False
        self.last_accessed_at = 0.0

    def initialize(self) -> None:
        """대화 기록이 비어 있으면 세션 언어의 인사 메시지를 추가합니다."""
        if self.messages:
            return
        self.add_message(Sender.ASSISTANT, greeting_for(self.locale))

    def add_message(self, sender: Sender, text: str) -> ChatMessage:
        message = ChatMessage(
            id=uuid4().hex,
            sender=sender,
            text=text,
            timestamp=datetime.now(UTC),
        )
        self.messages.append(message)
        return message

    def update_collected_info(self, info: CollectedInfo) -> None:
        """수집 정보를 병합합니다. 기존 값은 새 값이 있을 때만 바뀝니다."""
        self.collected_info = self.collected_info.merge(info)

    def set_places(self, places: list[Place]) -> None:
        self.places = list(places)

    def clear(self) -> None:
        """대화 기록, 수집 정보, 검색 결과를 모두 초기화합니다."""
        self.messages = []
        self.collected_info = CollectedInfo()
        self.places = []

    def recent_history(self, limit: int) -> list[Message]:
        """LLM 프롬프트용 최근 대화 기록을 반환합니다."""
        if limit <= 0:
            return []
        return [
            Message(role="user" if message.sender == Sender.USER else "assistant", content=message.text)
            for message in self.messages[-limit:]
        ]

    @contextmanager
    def turn(self) -> Iterator[ChatSession]:
        """턴 처리 동안 로딩 플래그를 세웁니다. 이미 처리 중이면 거부합니다."""
        if self.is_loading:
            raise SessionBusyError("이전 요청을 처리하는 중입니다. 잠시 후 다시 시도해 주세요.")
        self.is_loading = True
        try:
            yield self
        finally:
            self.is_loading = False

    def to_response(self) -> SessionResponse:
        return SessionResponse(
            id=self.id,
            messages=list(self.messages),
            collected_info=self.collected_info,
            places=list(self.places),
            is_loading=self.is_loading,
        )


class SessionStore:
    """메모리 기반 세션 저장소. 프로세스 재시작 시 모든 세션이 사라진다.

    마지막 접근 후 `idle_ttl_seconds`가 지난 세션은 만료되고, 세션 수가
    `max_sessions`를 넘으면 가장 오래 접근하지 않은 세션부터 제거한다.
    턴을 처리 중인 세션은 제거하지 않는다.
    """

    def __init__(
        self,
        *,
        idle_ttl_seconds: float = 1800,
        max_sessions: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sessions: OrderedDict[str, ChatSession] = OrderedDict()
        self._idle_ttl_seconds = idle_ttl_seconds
        self._max_sessions = max(1, max_sessions)
        self._clock = clock

    def create(self, locale: str | None = None) -> ChatSession:
        self.evict_expired()
        session = ChatSession(locale=locale)
        session.initialize()
        self._sessions[session.id] = session
        self._touch(session)
        self._evict_overflow(keep=session.id)
        return session

    def get(self, session_id: str) -> ChatSession | None:
        self.evict_expired()
        session = self._sessions.get(session_id)
        if session is not None:
            self._touch(session)
        return session

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def evict_expired(self) -> int:
        """유휴 시간이 만료된 세션을 제거하고 제거한 개수를 반환합니다."""
        now = self._clock()
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if not session.is_loading and now - session.last_accessed_at >= self._idle_ttl_seconds
        ]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.info("Expired sessions evicted: count=%d remaining=%d", len(expired), len(self._sessions))
        return len(expired)

    def _touch(self, session: ChatSession) -> None:
        session.last_accessed_at = self._clock()
        self._sessions.move_to_end(session.id)

    def _evict_overflow(self, *, keep: str) -> None:
        overflow = len(self._sessions) - self._max_sessions
        if overflow <= 0:
            return
        # OrderedDict는 오래 접근하지 않은 순서로 정렬되어 있다.
        candidates = [
            session_id
            for session_id, session in self._sessions.items()
            if session_id != keep and not session.is_loading
        ][:overflow]
        for session_id in candidates:
            del self._sessions[session_id]
        logger.info("Session store over capacity: evicted=%d remaining=%d", len(candidates), len(self._sessions))

    def __len__(self) -> int:
        return len(self._sessions)

"""대화 상태 및 입력 보조 기능."""

from hashkorea.conversation.session import ChatSession, SessionBusyError, SessionStore

__all__ = ["ChatSession", "SessionBusyError", "SessionStore"]

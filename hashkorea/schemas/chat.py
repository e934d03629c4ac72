"""대화(Chat) 요청/응답 스키마."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from hashkorea.schemas.enums import ResponseType


def _as_str_list(value: Any) -> list[str] | None:
    """LLM이 반환한 단일 문자열/리스트를 공백 없는 문자열 리스트로 정규화합니다."""
    if value is None:
        return None
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return None
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


class CollectedInfo(BaseModel):
    """대화 턴에 걸쳐 수집되는 검색 정보."""

    model_config = ConfigDict(extra="ignore")

    location: str | None = Field(default=None, description="지역")
    purpose: str | None = Field(default=None, description="방문 목적 또는 장소 유형")
    preferences: list[str] | None = Field(default=None, description="선호 조건 목록")

    @field_validator("location", "purpose", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("preferences", mode="before")
    @classmethod
    def _normalize_preferences(cls, value: Any) -> list[str] | None:
        return _as_str_list(value)

    def merge(self, update: CollectedInfo | None) -> CollectedInfo:
        """새 값이 있는 필드만 덮어쓴 새 객체를 반환합니다.

        `None`, 빈 문자열, 빈 리스트는 값이 없는 것으로 보고 기존 값을 유지합니다.
        """
        if update is None:
            return self.model_copy()
        return CollectedInfo(
            location=update.location or self.location,
            purpose=update.purpose or self.purpose,
            preferences=list(update.preferences) if update.preferences else self.preferences,
        )


class Message(BaseModel):
    """LLM 대화 메시지 모델."""

    role: str = Field(..., description="메시지 역할 (user / assistant)")
    content: str = Field(..., description="메시지 내용")


class ChatRequest(BaseModel):
    """턴 처리 요청 모델.

    Fields:
        messages: 대화 메시지 목록. 마지막 메시지가 이번 턴의 사용자 발화다.
        collected_info: 현재까지 수집된 정보
        locale: 응답 언어 (en / ko / ja / zh)
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    messages: list[Message] = Field(..., min_length=1, description="대화 메시지 목록")
    collected_info: CollectedInfo = Field(default_factory=CollectedInfo, description="현재까지 수집된 정보")
    locale: str | None = Field(default=None, description="응답 언어 코드")

    @field_validator("collected_info", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class TurnJudgment(BaseModel):
    """LLM이 한 턴에 대해 반환하는 구조화 판정.

    파싱 실패를 줄이기 위해 최소 제약으로 먼저 파싱한다.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    type: str = Field(..., description="응답 타입 (chat / recommendation)")
    message: str = Field(default="", description="사용자에게 보여줄 메시지")
    collected_info: CollectedInfo | None = Field(default=None, description="이번 턴까지 갱신된 수집 정보")
    is_complete: bool | None = Field(default=None, description="검색에 필요한 정보가 모두 모였는지 여부")
    missing_info: list[str] = Field(default_factory=list, description="아직 부족한 정보 목록")
    search_terms: list[str] = Field(default_factory=list, description="장소 유형 검색어")
    location: str | None = Field(default=None, description="검색 지역")
    requirements: list[str] = Field(default_factory=list, description="특별 요구사항")
    place_type: str | None = Field(default=None, description="대표 장소 유형")

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> str:
        return str(value or "").strip().lower()

    @field_validator("message", mode="before")
    @classmethod
    def _null_message_to_empty(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("missing_info", "search_terms", "requirements", mode="before")
    @classmethod
    def _normalize_lists(cls, value: Any) -> list[str]:
        return _as_str_list(value) or []

    @field_validator("location", "place_type", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


class ChatResponse(BaseModel):
    """턴 처리 응답 모델.

    Fields:
        type: chat 또는 recommendation
        message: 사용자에게 전달할 메시지
        collected_info: 병합된 수집 정보
        search_terms/location/requirements/place_type: recommendation일 때의 검색 지시
        is_complete: LLM이 보고한 정보 충족 여부
        missing_info: LLM이 보고한 부족 정보 목록
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: ResponseType = Field(..., description="응답 타입")
    message: str = Field(default="", description="사용자에게 전달할 메시지")
    collected_info: CollectedInfo = Field(..., description="병합된 수집 정보")
    search_terms: list[str] | None = Field(default=None, description="장소 유형 검색어")
    location: str | None = Field(default=None, description="검색 지역")
    requirements: list[str] | None = Field(default=None, description="특별 요구사항")
    place_type: str | None = Field(default=None, description="대표 장소 유형")
    is_complete: bool = Field(default=False, description="정보 충족 여부")
    missing_info: list[str] = Field(default_factory=list, description="부족한 정보 목록")

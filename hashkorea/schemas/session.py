"""대화 세션 API 스키마."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from hashkorea.schemas.chat import CollectedInfo
from hashkorea.schemas.enums import ResponseType, Sender
from hashkorea.schemas.place import Place


class ChatMessage(BaseModel):
    """대화 기록에 추가되는 메시지. 생성 후 변경되지 않는다."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="메시지 ID")
    sender: Sender = Field(..., description="발화자")
    text: str = Field(..., description="메시지 내용")
    timestamp: datetime = Field(..., description="생성 시각 (UTC)")


class SessionResponse(BaseModel):
    """세션 상태 응답."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="세션 ID")
    messages: list[ChatMessage] = Field(default_factory=list, description="대화 기록")
    collected_info: CollectedInfo = Field(default_factory=CollectedInfo, description="수집 정보")
    places: list[Place] = Field(default_factory=list, description="최근 검색된 장소 마커")
    is_loading: bool = Field(default=False, description="턴 처리 중 여부")


class SendMessageRequest(BaseModel):
    """세션 메시지 전송 요청."""

    text: str = Field(..., min_length=1, description="사용자 발화")
    locale: str | None = Field(default=None, description="응답 언어 코드")


class TurnOutcome(BaseModel):
    """세션 턴 처리 결과."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: ResponseType | None = Field(default=None, description="턴 결과 유형 (오류 시 null)")
    messages: list[ChatMessage] = Field(default_factory=list, description="이번 턴에 추가된 메시지")
    collected_info: CollectedInfo = Field(default_factory=CollectedInfo, description="병합된 수집 정보")
    places: list[Place] = Field(default_factory=list, description="이번 턴에 검색된 장소 마커")
    error: str | None = Field(default=None, description="턴 처리 오류 메시지")

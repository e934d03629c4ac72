"""도메인 열거형 정의."""

from enum import StrEnum


class ResponseType(StrEnum):
    """턴 처리 결과 유형."""

    CHAT = "chat"
    RECOMMENDATION = "recommendation"


class Sender(StrEnum):
    """대화 메시지 발화자."""

    USER = "user"
    ASSISTANT = "assistant"


class PlaceCategory(StrEnum):
    """지도 마커 카테고리."""

    CAFE = "cafe"
    FOOD = "food"
    DRINK = "drink"
    CLUB = "club"
    LANDMARK = "landmark"
    OTHERS = "others"

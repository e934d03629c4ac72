"""턴 처리 및 장소 검색 API."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from hashkorea.api.dependencies import get_places_service, get_turn_llm
from hashkorea.core.config import get_settings
from hashkorea.core.errors import TurnParseError, UpstreamServiceError
from hashkorea.core.logger import get_logger
from hashkorea.schemas.chat import ChatRequest, ChatResponse
from hashkorea.schemas.place import PlaceSearchRequest, PlaceSearchResponse
from hashkorea.services.google_places_service import GooglePlacesError
from hashkorea.services.places_service import PlacesServiceProtocol
from hashkorea.services.search_service import search_places
from hashkorea.services.turn_processor import process_turn

router = APIRouter(prefix="/api", tags=["chat"])
logger = get_logger(__name__)

GENERIC_PROCESSING_ERROR = "응답을 처리하는 중 오류가 발생했습니다."

CHAT_RESPONSE_EXAMPLES = {
    "chat": {
        "summary": "정보 추가 요청",
        "description": "검색에 필요한 정보가 부족해 되묻는 경우",
        "value": {
            "type": "chat",
            "message": "어느 지역에서 찾으시나요?",
            "collectedInfo": {"location": None, "purpose": "카페", "preferences": ["조용한"]},
            "searchTerms": None,
            "location": None,
            "requirements": None,
            "placeType": None,
            "isComplete": False,
            "missingInfo": ["location"],
        },
    },
    "recommendation": {
        "summary": "장소 검색 지시",
        "description": "정보가 모두 모여 검색을 실행할 수 있는 경우",
        "value": {
            "type": "recommendation",
            "message": "홍대 근처의 조용한 카페를 찾아보겠습니다.",
            "collectedInfo": {"location": "홍대", "purpose": "카페", "preferences": ["조용한"]},
            "searchTerms": ["카페"],
            "location": "홍대",
            "requirements": ["조용한"],
            "placeType": "cafe",
            "isComplete": True,
            "missingInfo": [],
        },
    },
}


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        200: {"content": {"application/json": {"examples": CHAT_RESPONSE_EXAMPLES}}},
        400: {"description": "마지막 메시지가 비어 있음"},
        500: {"description": "LLM 응답 형식 오류"},
        502: {"description": "LLM 호출 실패 또는 미설정"},
    },
)
async def chat_turn(
    request: ChatRequest,
    llm: Any = Depends(get_turn_llm),  # noqa: B008
) -> ChatResponse:
    """사용자 발화 한 턴을 판정합니다. 장소 검색은 수행하지 않습니다."""
    *history, latest = request.messages
    user_query = latest.content.strip()
    if not user_query:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="마지막 메시지 내용이 비어 있습니다.")

    history_limit = get_settings().CHAT_HISTORY_LIMIT
    recent_history = history[-history_limit:] if history_limit else []

    try:
        return await process_turn(
            user_query,
            request.collected_info,
            history=recent_history,
            locale=request.locale,
            llm=llm,
        )
    except TurnParseError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=GENERIC_PROCESSING_ERROR) from exc
    except UpstreamServiceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc


@router.post("/places/search", response_model=PlaceSearchResponse, tags=["places"])
async def search_places_endpoint(
    request: PlaceSearchRequest,
    places_service: PlacesServiceProtocol | None = Depends(get_places_service),  # noqa: B008
) -> PlaceSearchResponse:
    """검색 지시를 실행해 최대 5개의 지도 마커를 반환합니다."""
    if places_service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="장소 검색 기능이 설정되지 않았습니다.",
        )

    try:
        query, places = await search_places(
            places_service,
            request.search_terms,
            request.location,
            request.requirements,
        )
    except GooglePlacesError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    return PlaceSearchResponse(query=query, places=places)

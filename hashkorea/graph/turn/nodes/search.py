"""장소 검색 노드."""

from __future__ import annotations

from langchain_core.runnables import RunnableConfig

from hashkorea.core.logger import get_logger
from hashkorea.graph.turn.state import TurnState
from hashkorea.services.google_places_service import (
    GooglePlacesError,
    GooglePlacesNotConfiguredError,
    get_google_places_service,
)
from hashkorea.services.places_service import PlacesServiceProtocol
from hashkorea.services.search_service import search_places

logger = get_logger(__name__)


async def search_places_node(state: TurnState, config: RunnableConfig) -> TurnState:
    """recommendation 판정의 검색 지시를 실행합니다."""
    turn = state.get("turn") or {}

    places_service: PlacesServiceProtocol | None = config.get("configurable", {}).get("places_service")
    if places_service is None:
        try:
            places_service = get_google_places_service()
        except GooglePlacesNotConfiguredError as exc:
            logger.error("PlacesService initialization failed: %s", exc)
            return {**state, "places": [], "error": "장소 검색 기능이 설정되지 않았습니다."}

    try:
        query, places = await search_places(
            places_service,
            turn.get("search_terms") or [],
            turn.get("location"),
            turn.get("requirements") or [],
        )
    except GooglePlacesError as exc:
        return {**state, "places": [], "error": str(exc)}

    return {
        **state,
        "query": query,
        "places": [place.model_dump(mode="json") for place in places],
    }

"""검색 지시를 장소 마커 목록으로 변환하는 서비스."""

from __future__ import annotations

from collections.abc import Iterable

from hashkorea.core.config import get_settings
from hashkorea.core.logger import get_logger
from hashkorea.core.place_types import map_place_category
from hashkorea.schemas.place import MapPosition, Place, RawPlace
from hashkorea.services.places_service import PlacesServiceProtocol

logger = get_logger(__name__)

MAX_SEARCH_RESULTS = 5


def _clean_terms(values: Iterable[str] | None) -> list[str]:
    return [str(value).strip() for value in (values or []) if value and str(value).strip()]


def build_search_query(search_terms: list[str], location: str | None, requirements: list[str] | None = None) -> str:
    """요구사항, 장소 유형, 지역을 하나의 자유 텍스트 검색어로 합칩니다."""
    parts = [*_clean_terms(requirements), *_clean_terms(search_terms), *_clean_terms([location or ""])]
    return " ".join(parts)


def to_map_place(raw: RawPlace, index: int) -> Place:
    """검색 원본 결과를 지도 마커로 변환합니다."""
    geometry = raw.geometry
    primary_type = raw.types[0] if raw.types else "unknown"
    return Place(
        id=raw.place_id or f"place-{index}",
        name=raw.name or "",
        position=MapPosition(
            lat=geometry.latitude if geometry else 0.0,
            lng=geometry.longitude if geometry else 0.0,
        ),
        category=map_place_category(primary_type),
        address=raw.address,
    )


async def search_places(
    places_service: PlacesServiceProtocol,
    search_terms: list[str],
    location: str | None,
    requirements: list[str] | None = None,
    *,
    limit: int | None = None,
) -> tuple[str, list[Place]]:
    """검색어를 만들어 한 번 검색하고 상위 결과만 마커로 반환합니다.

    Returns:
        (실행한 검색어, 최대 5개의 장소 마커)
    """
    resolved_limit = limit if limit is not None else get_settings().SEARCH_RESULT_LIMIT
    resolved_limit = min(MAX_SEARCH_RESULTS, max(1, resolved_limit))

    query = build_search_query(search_terms, location, requirements)
    if not query:
        return query, []

    raw_places = await places_service.search(query)
    places = [to_map_place(raw, index) for index, raw in enumerate(raw_places[:resolved_limit])]
    logger.info("Place search mapped: query=%s result_count=%d", query, len(places))
    return query, places


def format_search_results(places: list[Place]) -> str:
    """검색 결과를 대화 메시지용 목록 문자열로 만듭니다."""
    if not places:
        return "조건에 맞는 장소를 찾지 못했습니다. 다른 지역이나 조건으로 다시 요청해 주세요."

    lines = [
        f"{index}. {place.name} ({place.address or '주소 없음'})"
        for index, place in enumerate(places, start=1)
    ]
    return "검색 결과입니다:\n\n" + "\n".join(lines) + "\n\n더 자세한 정보가 필요하신가요?"

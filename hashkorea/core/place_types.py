"""장소 유형 문자열을 지도 마커 카테고리로 매핑합니다."""

from __future__ import annotations

from hashkorea.schemas.enums import PlaceCategory

# 순서가 곧 우선순위다. 먼저 일치한 카테고리가 선택된다.
_CATEGORY_KEYWORDS: tuple[tuple[PlaceCategory, tuple[str, ...]], ...] = (
    (PlaceCategory.CAFE, ("cafe", "bakery", "coffee")),
    (PlaceCategory.FOOD, ("restaurant", "food", "meal")),
    (PlaceCategory.DRINK, ("bar", "liquor", "pub")),
    (PlaceCategory.CLUB, ("night_club", "club")),
    (
        PlaceCategory.LANDMARK,
        ("tourist", "attraction", "museum", "art_gallery", "park", "amusement_park"),
    ),
)


def map_place_category(raw_type: str | None) -> PlaceCategory:
    """자유 형식 유형 문자열을 6개 카테고리 중 하나로 변환합니다.

    대소문자를 무시한 부분 문자열 일치로 판정하며, 일치하는 항목이 없으면
    `PlaceCategory.OTHERS`를 반환합니다.
    """
    normalized = (raw_type or "").strip().lower()
    if not normalized:
        return PlaceCategory.OTHERS

    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in normalized for keyword in keywords):
            return category
    return PlaceCategory.OTHERS

"""장소 검색 실행 테스트."""

from __future__ import annotations

import asyncio

import pytest

from hashkorea.schemas.enums import PlaceCategory
from hashkorea.schemas.place import PlaceGeometry, RawPlace
from hashkorea.services.google_places_service import GooglePlacesError
from hashkorea.services.search_service import (
    build_search_query,
    format_search_results,
    search_places,
    to_map_place,
)
from tests.mocks.mock_places_service import MockPlacesService, failing_places_service


def test_build_search_query_joins_requirements_terms_and_location() -> None:
    query = build_search_query(["카페", " 디저트 "], "홍대", ["조용한", ""])

    assert query == "조용한 카페 디저트 홍대"


def test_build_search_query_skips_blank_parts() -> None:
    assert build_search_query([], None, None) == ""
    assert build_search_query(["cafe"], "  ", []) == "cafe"


def test_search_places_caps_results_at_five() -> None:
    service = MockPlacesService()

    query, places = asyncio.run(search_places(service, ["cafe"], "Hongdae", ["quiet"]))

    assert query == "quiet cafe Hongdae"
    assert service.queries == ["quiet cafe Hongdae"]
    assert len(places) == 5
    assert [place.category for place in places] == [
        PlaceCategory.CAFE,
        PlaceCategory.CAFE,
        PlaceCategory.CLUB,
        PlaceCategory.OTHERS,
        PlaceCategory.LANDMARK,
    ]
    assert places[0].id == "mock-hongdae-cafe-1"
    assert places[0].position.lat == pytest.approx(37.5474)


def test_search_places_respects_smaller_limit() -> None:
    _, places = asyncio.run(search_places(MockPlacesService(), ["bar"], "hongdae", limit=2))

    assert len(places) == 2


def test_search_places_without_query_does_not_call_service() -> None:
    service = MockPlacesService()

    query, places = asyncio.run(search_places(service, [], ""))

    assert query == ""
    assert places == []
    assert service.queries == []


def test_search_places_propagates_upstream_failure() -> None:
    with pytest.raises(GooglePlacesError):
        asyncio.run(search_places(failing_places_service(), ["cafe"], "Hongdae"))


def test_to_map_place_fills_defaults_for_missing_fields() -> None:
    place = to_map_place(RawPlace(name="이름만 있는 장소"), index=3)

    assert place.id == "place-3"
    assert place.position.lat == 0.0
    assert place.position.lng == 0.0
    assert place.category == PlaceCategory.OTHERS
    assert place.address is None


def test_to_map_place_uses_first_type_only() -> None:
    raw = RawPlace(
        place_id="p1",
        name="Museum Cafe",
        geometry=PlaceGeometry(latitude=37.5, longitude=127.0),
        types=["museum", "cafe"],
    )

    assert to_map_place(raw, index=0).category == PlaceCategory.LANDMARK


def test_format_search_results_lists_places() -> None:
    places = [
        to_map_place(RawPlace(place_id="a", name="카페 A", address="서울 마포구"), 0),
        to_map_place(RawPlace(place_id="b", name="카페 B"), 1),
    ]

    text = format_search_results(places)

    assert text.startswith("검색 결과입니다:")
    assert "1. 카페 A (서울 마포구)" in text
    assert "2. 카페 B (주소 없음)" in text
    assert text.endswith("더 자세한 정보가 필요하신가요?")


def test_format_search_results_without_places() -> None:
    assert "찾지 못했습니다" in format_search_results([])

"""Google Places 클라이언트 테스트."""

from __future__ import annotations

import asyncio

import pytest
import requests

from hashkorea.core.config import get_settings
from hashkorea.services import google_places_service as module
from hashkorea.services.google_places_service import (
    GooglePlacesError,
    GooglePlacesNotConfiguredError,
    GooglePlacesService,
    get_google_places_service,
)


class _FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _FakeSession:
    """requests.Session 대역. 마지막 요청을 클래스 속성에 기록한다."""

    last_request: dict = {}
    response: _FakeResponse | Exception = _FakeResponse(payload={})

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    def post(self, url, json=None, headers=None, timeout=None):
        _FakeSession.last_request = {"url": url, "json": json, "headers": headers, "timeout": timeout}
        if isinstance(_FakeSession.response, Exception):
            raise _FakeSession.response
        return _FakeSession.response


@pytest.fixture
def fake_session(monkeypatch):
    monkeypatch.setattr(module.requests, "Session", _FakeSession)
    _FakeSession.last_request = {}
    _FakeSession.response = _FakeResponse(payload={})
    return _FakeSession


def test_search_maps_places_and_sends_field_mask(fake_session) -> None:
    fake_session.response = _FakeResponse(
        payload={
            "places": [
                {
                    "id": "abc",
                    "displayName": {"text": "Anthracite"},
                    "formattedAddress": "Mapo-gu, Seoul",
                    "location": {"latitude": 37.54, "longitude": 126.91},
                    "types": ["cafe", "food"],
                    "googleMapsUri": "https://maps.google.com/?cid=1",
                },
                {"displayName": {"text": "No location"}},
            ]
        }
    )
    service = GooglePlacesService(api_key="key", timeout_seconds=10, page_size=5, language_code="ko")

    places = asyncio.run(service.search("조용한 카페 홍대"))

    request = fake_session.last_request
    assert request["url"].endswith("/places:searchText")
    assert request["json"] == {"textQuery": "조용한 카페 홍대", "pageSize": 5, "languageCode": "ko"}
    assert request["headers"]["X-Goog-Api-Key"] == "key"
    assert "places.types" in request["headers"]["X-Goog-FieldMask"]
    assert request["timeout"] == (3.0, 7.0)

    assert len(places) == 2
    assert places[0].place_id == "abc"
    assert places[0].geometry.latitude == 37.54
    assert places[0].types == ["cafe", "food"]
    assert places[1].place_id is None
    assert places[1].geometry is None


def test_blank_query_returns_empty_without_request(fake_session) -> None:
    service = GooglePlacesService(api_key="key")

    assert asyncio.run(service.search("   ")) == []
    assert fake_session.last_request == {}


@pytest.mark.parametrize(
    "response",
    [
        _FakeResponse(status_code=429, text="quota exceeded"),
        requests.ConnectionError("network down"),
        _FakeResponse(payload=ValueError("not json")),
    ],
)
def test_upstream_failures_raise_google_places_error(fake_session, response) -> None:
    fake_session.response = response
    service = GooglePlacesService(api_key="key")

    with pytest.raises(GooglePlacesError):
        asyncio.run(service.search("cafe Hongdae"))


def test_missing_api_key_raises_not_configured(monkeypatch) -> None:
    monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "")
    get_settings.cache_clear()
    get_google_places_service.cache_clear()

    with pytest.raises(GooglePlacesNotConfiguredError):
        get_google_places_service()

    get_settings.cache_clear()


def test_from_settings_uses_configured_values(monkeypatch) -> None:
    monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "places-key")
    monkeypatch.setenv("GOOGLE_PLACES_LANGUAGE_CODE", "en")
    monkeypatch.setenv("SEARCH_RESULT_LIMIT", "20")
    get_settings.cache_clear()

    service = GooglePlacesService.from_settings()

    assert service._api_key == "places-key"
    assert service._language_code == "en"
    assert service._page_size == 5

    get_settings.cache_clear()

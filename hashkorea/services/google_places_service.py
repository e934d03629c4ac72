"""Google Places API 서비스 구현."""

from __future__ import annotations

import asyncio
from functools import lru_cache
from typing import Any

import requests

from hashkorea.core.config import get_settings
from hashkorea.core.errors import HashKoreaError
from hashkorea.core.logger import get_logger
from hashkorea.core.timeout_policy import get_timeout_policy, to_requests_timeout
from hashkorea.schemas.place import PlaceGeometry, RawPlace
from hashkorea.services.places_service import PlacesServiceProtocol

logger = get_logger(__name__)


class GooglePlacesError(HashKoreaError):
    """Google Places 설정 또는 호출 실패 시 발생하는 예외."""


class GooglePlacesNotConfiguredError(GooglePlacesError):
    """GOOGLE_PLACES_API_KEY가 없을 때 발생하는 예외."""


class GooglePlacesService(PlacesServiceProtocol):
    """Google Places API(New) Text Search 기반 Places 서비스."""

    _BASE_URL = "https://places.googleapis.com/v1"
    _SEARCH_PATH = "/places:searchText"

    _SEARCH_FIELD_MASK = (
        "places.id,places.displayName,places.formattedAddress,places.location,places.types,places.googleMapsUri"
    )

    def __init__(
        self,
        api_key: str,
        timeout_seconds: int = 10,
        page_size: int = 5,
        language_code: str = "ko",
    ) -> None:
        if not api_key:
            raise GooglePlacesNotConfiguredError("GOOGLE_PLACES_API_KEY is not configured.")
        self._api_key = api_key
        self._timeout_seconds = timeout_seconds
        self._page_size = page_size
        self._language_code = language_code.strip() if language_code else ""

    @classmethod
    def from_settings(cls) -> GooglePlacesService:
        """애플리케이션 설정으로 서비스 인스턴스를 생성합니다."""
        settings = get_settings()
        timeout_policy = get_timeout_policy(settings)
        return cls(
            api_key=settings.GOOGLE_PLACES_API_KEY or "",
            timeout_seconds=timeout_policy.google_places_timeout_seconds,
            page_size=settings.SEARCH_RESULT_LIMIT,
            language_code=settings.GOOGLE_PLACES_LANGUAGE_CODE,
        )

    async def search(self, query: str) -> list[RawPlace]:
        """텍스트 쿼리로 장소를 검색합니다."""
        if not query.strip():
            return []

        payload: dict[str, Any] = {"textQuery": query, "pageSize": self._page_size}
        if self._language_code:
            payload["languageCode"] = self._language_code

        data = await self._request(
            url=f"{self._BASE_URL}{self._SEARCH_PATH}",
            payload=payload,
            field_mask=self._SEARCH_FIELD_MASK,
        )

        places = [self._map_place(item) for item in (data.get("places") or []) if isinstance(item, dict)]
        logger.info("Google Places search completed: query=%s candidate_count=%d", query, len(places))
        return places

    async def _request(self, url: str, payload: dict[str, Any], field_mask: str) -> dict[str, Any]:
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self._api_key,
            "X-Goog-FieldMask": field_mask,
        }
        request_timeout = to_requests_timeout(self._timeout_seconds)

        def _send() -> requests.Response:
            with requests.Session() as session:
                return session.post(url, json=payload, headers=headers, timeout=request_timeout)

        try:
            response = await asyncio.to_thread(_send)
            response.raise_for_status()
            data = response.json()
        except requests.HTTPError as exc:
            response = exc.response
            status_code = response.status_code if response is not None else None
            body = (response.text or "")[:200] if response is not None else ""
            logger.error("Google Places API error: status=%s body=%s", status_code, body)
            raise GooglePlacesError(f"장소 검색에 실패했습니다 (status={status_code}).") from exc
        except requests.RequestException as exc:
            logger.error("Google Places API request failed: %s", exc)
            raise GooglePlacesError("장소 검색 서버에 연결하지 못했습니다.") from exc
        except ValueError as exc:
            logger.error("Google Places API response parse failed: %s", exc)
            raise GooglePlacesError("장소 검색 응답을 해석하지 못했습니다.") from exc

        return data if isinstance(data, dict) else {}

    @staticmethod
    def _map_place(raw: dict[str, Any]) -> RawPlace:
        display_name = raw.get("displayName") or {}
        location = raw.get("location") or {}
        latitude = location.get("latitude")
        longitude = location.get("longitude")

        geometry = None
        if latitude is not None and longitude is not None:
            geometry = PlaceGeometry(latitude=latitude, longitude=longitude)

        return RawPlace(
            place_id=raw.get("id") or raw.get("placeId"),
            name=display_name.get("text") or "",
            address=raw.get("formattedAddress"),
            geometry=geometry,
            url=raw.get("googleMapsUri"),
            types=raw.get("types") or [],
        )


@lru_cache(maxsize=1)
def get_google_places_service() -> GooglePlacesService:
    """설정 재사용을 위한 프로세스 단위 싱글톤을 반환합니다.

    Raises:
        GooglePlacesNotConfiguredError: API 키가 없는 경우. 예외는 캐시되지 않으므로
            키를 설정한 뒤 다시 호출하면 정상 인스턴스가 생성된다.
    """
    return GooglePlacesService.from_settings()

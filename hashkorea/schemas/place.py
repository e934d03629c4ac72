"""장소 검색 결과 스키마."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from hashkorea.schemas.enums import PlaceCategory


class PlaceGeometry(BaseModel):
    """장소 위치 좌표."""

    latitude: float = Field(..., description="위도")
    longitude: float = Field(..., description="경도")


class RawPlace(BaseModel):
    """Google Places API 응답을 표준화한 장소 정보."""

    place_id: str | None = Field(default=None, description="Google Places API 고유 ID")
    name: str = Field(default="", description="장소 이름")
    address: str | None = Field(default=None, description="장소 주소")
    geometry: PlaceGeometry | None = Field(default=None, description="장소 좌표 정보")
    url: str | None = Field(default=None, description="구글 맵 URL")
    types: list[str] = Field(default_factory=list, description="장소 유형 목록")


class MapPosition(BaseModel):
    """지도 마커 좌표."""

    lat: float = Field(..., description="위도")
    lng: float = Field(..., description="경도")


class Place(BaseModel):
    """지도에 표시할 장소 마커."""

    id: str = Field(..., description="장소 ID")
    name: str = Field(..., description="장소 이름")
    position: MapPosition = Field(..., description="마커 좌표")
    category: PlaceCategory = Field(..., description="마커 카테고리")
    address: str | None = Field(default=None, description="장소 주소")


class PlaceSearchRequest(BaseModel):
    """장소 검색 요청 모델."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    search_terms: list[str] = Field(..., min_length=1, description="장소 유형 검색어 목록")
    location: str = Field(..., min_length=1, description="지역")
    requirements: list[str] = Field(default_factory=list, description="특별 요구사항")


class PlaceSearchResponse(BaseModel):
    """장소 검색 응답 모델."""

    query: str = Field(..., description="실제 실행한 검색어")
    places: list[Place] = Field(default_factory=list, description="최대 5개의 장소 마커")

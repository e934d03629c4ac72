"""Places 서비스 추상 프로토콜 정의."""

from abc import ABC, abstractmethod

from hashkorea.schemas.place import RawPlace


class PlacesServiceProtocol(ABC):
    """Places API 호출을 위한 인터페이스를 정의합니다."""

    @abstractmethod
    async def search(self, query: str) -> list[RawPlace]:
        """자유 텍스트 쿼리로 장소를 검색합니다.

        Args:
            query: 검색 쿼리

        Returns:
            API가 반환한 순서 그대로의 장소 목록

        Raises:
            GooglePlacesError: 외부 API 호출이 실패한 경우
        """
        raise NotImplementedError

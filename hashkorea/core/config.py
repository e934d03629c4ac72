"""애플리케이션 전역 설정을 관리하는 모듈."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_LOCALES: tuple[str, ...] = ("en", "ko", "ja", "zh")
DEFAULT_LOCALE = "en"


class Settings(BaseSettings):
    """환경 변수 기반 설정 모델.

    외부 서비스 자격 증명은 선택 값입니다. 누락되어도 서버는 기동되며,
    해당 기능 호출 시점에만 오류로 보고됩니다.
    """

    OPENAI_API_KEY: str | None = None
    LLM_MODEL_NAME: str = "gpt-4o-mini"
    LLM_TEMPERATURE: float = 0.0
    LLM_TIMEOUT_SECONDS: int = 30
    REQUEST_TIMEOUT_SECONDS: int = 60
    GOOGLE_PLACES_API_KEY: str | None = None
    GOOGLE_PLACES_TIMEOUT_SECONDS: int = 10
    GOOGLE_PLACES_LANGUAGE_CODE: str = "ko"
    SEARCH_RESULT_LIMIT: int = 5
    CHAT_HISTORY_LIMIT: int = 6
    SESSION_IDLE_TTL_SECONDS: int = 1800
    SESSION_MAX_COUNT: int = 1000
    DOCS_MODE: str = "disabled"
    EXPOSE_INTERNAL_ERRORS: bool = False
    CORS_ALLOW_ORIGINS: str = ""
    CORS_ALLOW_METHODS: str = "GET,POST,DELETE,OPTIONS"
    CORS_ALLOW_HEADERS: str = "Content-Type"
    CORS_ALLOW_CREDENTIALS: bool = False
    SECURITY_HEADERS_ENABLED: bool = True
    ENABLE_HSTS: bool = False
    HSTS_MAX_AGE_SECONDS: int = 31536000
    PROXY_HEADERS_ENABLED: bool = True
    PROXY_TRUSTED_HOSTS: str = "127.0.0.1"
    TRUSTED_HOSTS: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("OPENAI_API_KEY", "GOOGLE_PLACES_API_KEY", mode="before")
    @classmethod
    def _blank_credential_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("SEARCH_RESULT_LIMIT", mode="before")
    @classmethod
    def _clamp_search_result_limit(cls, value: object) -> int:
        try:
            numeric = int(value) if value is not None else 5
        except (TypeError, ValueError):
            numeric = 5
        return min(5, max(1, numeric))

    @field_validator("CHAT_HISTORY_LIMIT", mode="before")
    @classmethod
    def _clamp_chat_history_limit(cls, value: object) -> int:
        try:
            numeric = int(value) if value is not None else 6
        except (TypeError, ValueError):
            numeric = 6
        return min(20, max(0, numeric))


def resolve_locale(locale: str | None) -> str:
    """지원 언어 코드로 정규화합니다. 지원하지 않는 값은 기본 언어로 대체합니다."""
    normalized = (locale or "").strip().lower().split("-")[0]
    if normalized in SUPPORTED_LOCALES:
        return normalized
    return DEFAULT_LOCALE


@lru_cache
def get_settings() -> Settings:
    """Settings 인스턴스를 반환한다. 최초 호출 시에만 생성되고 이후 캐싱된다."""
    return Settings()

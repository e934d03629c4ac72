"""대화 턴 처리 예외 정의.

모든 예외는 단일 턴 범위에서만 처리되며 프로세스를 종료시키지 않습니다.
"""


class HashKoreaError(Exception):
    """서비스 공통 예외."""


class TurnProcessingError(HashKoreaError):
    """대화 턴 처리 실패."""


class TurnParseError(TurnProcessingError):
    """LLM 응답이 기대한 구조로 파싱되지 않을 때 발생합니다."""


class UpstreamServiceError(TurnProcessingError):
    """외부 서비스(LLM 등) 호출이 실패했을 때 발생합니다."""


class LLMNotConfiguredError(UpstreamServiceError):
    """OPENAI_API_KEY가 설정되지 않았을 때 발생합니다."""

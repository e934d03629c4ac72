"""음성 입력 인터페이스.

인식 엔진은 클라이언트 구현에 맡기고, 여기서는 시작/중지/결과 콜백 계약과
최종 인식 결과를 하나의 발화로 모으는 누적기만 제공합니다.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SpeechResult:
    """음성 인식 결과 한 건."""

    transcript: str
    is_final: bool
    confidence: float | None = None


SpeechResultCallback = Callable[[SpeechResult], None]


class SpeechRecognizer(ABC):
    """음성 인식 엔진 인터페이스."""

    @abstractmethod
    def start(self) -> None:
        """인식을 시작합니다."""
        raise NotImplementedError

    @abstractmethod
    def stop(self) -> None:
        """인식을 중지합니다."""
        raise NotImplementedError

    @abstractmethod
    def on_result(self, callback: SpeechResultCallback) -> None:
        """인식 결과 콜백을 등록합니다."""
        raise NotImplementedError


class TranscriptAccumulator:
    """최종 인식 결과만 공백으로 이어 붙여 하나의 발화로 만든다."""

    def __init__(self) -> None:
        self._parts: list[str] = []
        self.interim: str = ""

    def bind(self, recognizer: SpeechRecognizer) -> None:
        recognizer.on_result(self.add)

    def listen(self, recognizer: SpeechRecognizer) -> None:
        """누적 결과를 비우고 인식을 시작합니다."""
        self.reset()
        recognizer.start()

    def reset(self) -> None:
        self._parts = []
        self.interim = ""

    def add(self, result: SpeechResult) -> None:
        text = result.transcript.strip()
        if not result.is_final:
            self.interim = text
            return
        self.interim = ""
        if text:
            self._parts.append(text)

    @property
    def text(self) -> str:
        return " ".join(self._parts)

"""대화 턴 처리기.

사용자 발화와 현재 수집 정보를 LLM에 보내 구조화된 판정을 받고,
수집 정보를 병합한 뒤 `chat` 또는 `recommendation` 결과로 정리합니다.
완료 여부는 LLM 판정을 그대로 따르며, 검색 지시가 불완전하면 `chat`으로 낮춥니다.
"""

from __future__ import annotations

import json
from typing import Any

from langchain_core.output_parsers import PydanticOutputParser
from langchain_core.prompts import ChatPromptTemplate
from pydantic import ValidationError

from hashkorea.core.config import resolve_locale
from hashkorea.core.errors import TurnParseError
from hashkorea.core.json_utils import extract_json_object, strip_code_fence
from hashkorea.core.llm import ainvoke_text
from hashkorea.core.logger import get_logger
from hashkorea.schemas.chat import ChatResponse, CollectedInfo, Message, TurnJudgment
from hashkorea.schemas.enums import ResponseType

logger = get_logger(__name__)

_LANGUAGE_NAMES = {
    "en": "English",
    "ko": "Korean (한국어)",
    "ja": "Japanese (日本語)",
    "zh": "Chinese (中文)",
}

_FIELD_LABELS = {
    "location": "지역",
    "purpose": "방문 목적",
    "preferences": "선호 조건",
    "searchTerms": "장소 유형",
}

SYSTEM_PROMPT = """\
당신은 여행지 추천 AI 도우미입니다. 사용자와 자연스럽게 대화하면서 장소 검색에 필요한
정보(지역 location, 목적 purpose, 선호 조건 preferences)를 한 턴씩 수집합니다.

규칙:
- 이전 턴까지 수집된 정보(collectedInfo)를 유지하고, 이번 발화에서 새로 알게 된 값만 갱신하세요.
- 모르는 값은 null로 두세요. 이미 알고 있는 값을 null로 되돌리지 마세요.
- 세 가지 정보가 모두 모이면 isComplete를 true, missingInfo를 빈 배열로 두고 type을 "recommendation"으로 응답하세요.
- 정보가 부족하면 type을 "chat"으로 두고, missingInfo에 부족한 필드 이름을 넣고,
  message에 부족한 정보를 묻는 짧은 질문을 작성하세요.
- recommendation일 때 searchTerms(장소 유형), location(지역), requirements(특별 요구사항)를 채우세요.
- placeType에는 cafe, food, drink, club, landmark, others 중 가장 가까운 값을 넣으세요.
- message는 반드시 {language}로 작성하세요.
- 응답은 JSON만 출력하세요.

예시 1:
수집된 정보: {{"location": null, "purpose": null, "preferences": null}}
입력: "홍대 근처 조용한 카페 추천해줘"
출력: {{"type": "recommendation", "message": "홍대 근처의 조용한 카페를 찾아보겠습니다.",
"collectedInfo": {{"location": "홍대", "purpose": "카페", "preferences": ["조용한"]}},
"isComplete": true, "missingInfo": [], "searchTerms": ["카페"], "location": "홍대",
"requirements": ["조용한"], "placeType": "cafe"}}

예시 2:
수집된 정보: {{"location": null, "purpose": null, "preferences": null}}
입력: "안녕하세요"
출력: {{"type": "chat", "message": "안녕하세요! 어느 지역에서 어떤 장소를 찾으시나요?",
"collectedInfo": {{"location": null, "purpose": null, "preferences": null}},
"isComplete": false, "missingInfo": ["location", "purpose", "preferences"]}}

예시 3:
수집된 정보: {{"location": "강남역", "purpose": null, "preferences": null}}
입력: "24시간 하는 식당이면 좋겠어"
출력: {{"type": "recommendation", "message": "강남역 근처의 24시간 영업하는 식당을 찾아보겠습니다.",
"collectedInfo": {{"location": "강남역", "purpose": "식당", "preferences": ["24시간"]}},
"isComplete": true, "missingInfo": [], "searchTerms": ["식당", "레스토랑"], "location": "강남역",
"requirements": ["24시간"], "placeType": "food"}}

{format_instructions}
"""

USER_PROMPT = """\
{history_context}\
수집된 정보: {collected_info}
입력: "{user_query}"
"""


def _build_history_context(history: list[Message] | None) -> str:
    """최근 대화 기록을 프롬프트 컨텍스트로 변환합니다."""
    if not history:
        return ""
    lines = [f"[{message.role}] {message.content.strip()}" for message in history if message.content.strip()]
    if not lines:
        return ""
    return "최근 대화 맥락:\n" + "\n".join(lines) + "\n\n"


def build_turn_messages(
    user_query: str,
    collected_info: CollectedInfo,
    history: list[Message] | None = None,
    locale: str | None = None,
) -> list[Any]:
    """턴 판정용 프롬프트 메시지를 구성합니다."""
    parser = PydanticOutputParser(pydantic_object=TurnJudgment)
    prompt = ChatPromptTemplate.from_messages([("system", SYSTEM_PROMPT), ("human", USER_PROMPT)])
    return prompt.format_messages(
        language=_LANGUAGE_NAMES[resolve_locale(locale)],
        format_instructions=parser.get_format_instructions(),
        history_context=_build_history_context(history),
        collected_info=json.dumps(collected_info.model_dump(), ensure_ascii=False),
        user_query=user_query.strip(),
    )


def parse_turn_judgment(text: str) -> TurnJudgment:
    """LLM 응답 문자열을 판정 모델로 파싱합니다. 실패 시 JSON 복구를 시도합니다.

    Raises:
        TurnParseError: 응답이 판정 구조로 해석되지 않거나 type 값이 올바르지 않은 경우.
    """
    content = strip_code_fence(text)
    parser = PydanticOutputParser(pydantic_object=TurnJudgment)

    try:
        judgment = parser.parse(content)
    except Exception as exc:
        recovered = extract_json_object(content)
        if recovered is None:
            raise TurnParseError("턴 판정 응답 파싱에 실패했습니다.") from exc
        try:
            judgment = TurnJudgment.model_validate(recovered)
        except ValidationError as validation_exc:
            raise TurnParseError("턴 판정 응답 파싱에 실패했습니다.") from validation_exc

    if judgment.type not in {ResponseType.CHAT.value, ResponseType.RECOMMENDATION.value}:
        raise TurnParseError(f"알 수 없는 턴 판정 타입입니다: {judgment.type!r}")
    return judgment


def _clarifying_message(missing: list[str]) -> str:
    labels = [_FIELD_LABELS.get(name, name) for name in missing]
    if not labels:
        return "조금 더 자세히 알려주시겠어요?"
    return f"추천을 위해 {', '.join(labels)} 정보를 조금 더 알려주시겠어요?"


def _search_directive_gaps(judgment: TurnJudgment) -> list[str]:
    """recommendation 판정이 검색을 실행하기에 부족한 이유를 모읍니다."""
    gaps = list(judgment.missing_info)
    if judgment.is_complete is False and not gaps:
        gaps.append("isComplete")
    if not judgment.search_terms:
        gaps.append("searchTerms")
    if not judgment.location:
        gaps.append("location")
    return gaps


def resolve_turn(judgment: TurnJudgment, collected_info: CollectedInfo) -> ChatResponse:
    """판정을 병합된 수집 정보와 함께 최종 턴 결과로 정리합니다."""
    merged = collected_info.merge(judgment.collected_info)

    if judgment.type == ResponseType.CHAT.value:
        return ChatResponse(
            type=ResponseType.CHAT,
            message=judgment.message or _clarifying_message(judgment.missing_info),
            collected_info=merged,
            is_complete=bool(judgment.is_complete),
            missing_info=judgment.missing_info,
        )

    gaps = _search_directive_gaps(judgment)
    if gaps:
        logger.info("Recommendation downgraded to chat: gaps=%s", gaps)
        missing = [gap for gap in gaps if gap != "isComplete"]
        return ChatResponse(
            type=ResponseType.CHAT,
            message=judgment.message or _clarifying_message(missing),
            collected_info=merged,
            is_complete=False,
            missing_info=missing,
        )

    return ChatResponse(
        type=ResponseType.RECOMMENDATION,
        message=judgment.message or "장소를 찾아보겠습니다.",
        collected_info=merged,
        search_terms=judgment.search_terms,
        location=judgment.location,
        requirements=judgment.requirements,
        place_type=judgment.place_type,
        is_complete=True,
        missing_info=[],
    )


async def process_turn(
    user_query: str,
    collected_info: CollectedInfo | None = None,
    *,
    history: list[Message] | None = None,
    locale: str | None = None,
    llm: Any | None = None,
) -> ChatResponse:
    """사용자 발화 하나를 처리합니다.

    Raises:
        TurnParseError: LLM 응답 형식이 올바르지 않은 경우.
        UpstreamServiceError: LLM 호출 실패 또는 미설정.
    """
    snapshot = collected_info or CollectedInfo()
    messages = build_turn_messages(user_query, snapshot, history=history, locale=locale)
    text = await ainvoke_text(messages, llm=llm)

    try:
        judgment = parse_turn_judgment(text)
    except TurnParseError:
        logger.warning("Malformed turn judgment: %s", text[:200])
        raise

    result = resolve_turn(judgment, snapshot)
    logger.info(
        "Turn processed: type=%s judged_type=%s missing=%s",
        result.type.value,
        judgment.type,
        result.missing_info,
    )
    return result

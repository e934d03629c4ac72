"""대화 턴 LangGraph 워크플로우 테스트."""

from __future__ import annotations

import asyncio

from hashkorea.graph.turn import compiled_turn_graph
from hashkorea.graph.turn.nodes import respond
from hashkorea.graph.turn.nodes.judge import GENERIC_PROCESSING_ERROR
from hashkorea.graph.turn.workflow import _route_after_judge
from hashkorea.graph.turn.state import TurnState
from tests.mocks.fake_llm import FakeChatModel, judgment_json
from tests.mocks.mock_places_service import MockPlacesService, failing_places_service

_EMPTY_INFO = {"location": None, "purpose": None, "preferences": None}


def _invoke(state: TurnState, llm, places_service) -> dict:
    return asyncio.run(
        compiled_turn_graph.ainvoke(
            state,
            config={"configurable": {"llm": llm, "places_service": places_service}},
        )
    )


def _recommendation(**overrides) -> str:
    fields = {
        "type": "recommendation",
        "message": "홍대 근처의 조용한 카페를 찾아보겠습니다.",
        "collectedInfo": {"location": "hongdae", "purpose": "카페", "preferences": ["조용한"]},
        "isComplete": True,
        "missingInfo": [],
        "searchTerms": ["카페"],
        "location": "hongdae",
        "requirements": ["조용한"],
        "placeType": "cafe",
    }
    fields.update(overrides)
    return judgment_json(**fields)


class TestRouteAfterJudge:
    """judge 이후 분기 테스트."""

    def test_error_goes_to_respond(self):
        assert _route_after_judge({"error": "x", "turn": {"type": "recommendation"}}) == "respond"

    def test_chat_goes_to_respond(self):
        assert _route_after_judge({"turn": {"type": "chat"}}) == "respond"

    def test_recommendation_goes_to_search(self):
        assert _route_after_judge({"turn": {"type": "recommendation"}}) == "search"

    def test_missing_turn_goes_to_respond(self):
        assert _route_after_judge({"turn": None}) == "respond"


class TestTurnGraph:
    """턴 그래프 전체 실행 테스트."""

    def test_recommendation_runs_search_and_lists_results(self):
        places_service = MockPlacesService()
        result = _invoke(
            {"user_query": "홍대 조용한 카페", "collected_info": _EMPTY_INFO, "history": []},
            FakeChatModel(_recommendation()),
            places_service,
        )

        assert places_service.queries == ["조용한 카페 hongdae"]
        assert len(result["places"]) == 5
        assert result["assistant_messages"][0] == "홍대 근처의 조용한 카페를 찾아보겠습니다."
        assert result["assistant_messages"][1].startswith("검색 결과입니다:")
        assert result.get("error") is None

    def test_downgraded_recommendation_never_searches(self):
        places_service = MockPlacesService()
        result = _invoke(
            {"user_query": "카페", "collected_info": _EMPTY_INFO, "history": []},
            FakeChatModel(_recommendation(missingInfo=["location"], message="어느 지역인가요?")),
            places_service,
        )

        assert places_service.queries == []
        assert result["turn"]["type"] == "chat"
        assert result["assistant_messages"] == ["어느 지역인가요?"]

    def test_malformed_output_yields_generic_error(self):
        places_service = MockPlacesService()
        result = _invoke(
            {"user_query": "카페", "collected_info": _EMPTY_INFO, "history": []},
            FakeChatModel("<html>oops</html>"),
            places_service,
        )

        assert places_service.queries == []
        assert result["turn"] is None
        assert result["error"] == GENERIC_PROCESSING_ERROR
        assert result["assistant_messages"] == [f"죄송합니다. 오류가 발생했습니다: {GENERIC_PROCESSING_ERROR}"]

    def test_llm_failure_yields_error_message(self):
        result = _invoke(
            {"user_query": "카페", "collected_info": _EMPTY_INFO, "history": []},
            FakeChatModel(TimeoutError("timed out")),
            MockPlacesService(),
        )

        assert result["turn"] is None
        assert result["error"] == "LLM 호출에 실패했습니다."

    def test_search_failure_keeps_judgment_message_and_reports_error(self):
        result = _invoke(
            {"user_query": "홍대 조용한 카페", "collected_info": _EMPTY_INFO, "history": []},
            FakeChatModel(_recommendation()),
            failing_places_service(),
        )

        assert result["turn"]["type"] == "recommendation"
        assert result["places"] == []
        assert result["assistant_messages"] == [
            "홍대 근처의 조용한 카페를 찾아보겠습니다.",
            "죄송합니다. 오류가 발생했습니다: 장소 검색 서버에 연결하지 못했습니다.",
        ]

    def test_blank_query_is_rejected_without_llm_call(self):
        llm = FakeChatModel()
        result = _invoke({"user_query": "   ", "collected_info": _EMPTY_INFO}, llm, MockPlacesService())

        assert llm.calls == []
        assert result["error"] == "메시지 내용이 비어 있습니다."


def test_respond_without_turn_or_error_produces_no_messages() -> None:
    assert respond({"turn": None})["assistant_messages"] == []

"""대화 턴 그래프 워크플로우 구성."""

from langgraph.graph import END, StateGraph

from hashkorea.graph.turn.nodes import judge_turn, respond, search_places_node
from hashkorea.graph.turn.state import TurnState
from hashkorea.schemas.enums import ResponseType


def _route_after_judge(state: TurnState) -> str:
    """판정 결과에 따라 검색 여부를 결정합니다. 검색은 recommendation일 때만 실행한다."""
    if state.get("error"):
        return "respond"
    turn = state.get("turn") or {}
    if turn.get("type") == ResponseType.RECOMMENDATION.value:
        return "search"
    return "respond"


def _create_turn_workflow() -> StateGraph:
    """대화 턴 그래프 워크플로우를 생성합니다."""
    workflow = StateGraph(TurnState)

    workflow.add_node("judge", judge_turn)
    workflow.add_node("search", search_places_node)
    workflow.add_node("respond", respond)

    workflow.set_entry_point("judge")
    workflow.add_conditional_edges("judge", _route_after_judge, ["search", "respond"])
    workflow.add_edge("search", "respond")
    workflow.add_edge("respond", END)

    return workflow


compiled_turn_graph = _create_turn_workflow().compile()

"""대화 턴 그래프 노드 모음."""

from hashkorea.graph.turn.nodes.judge import judge_turn
from hashkorea.graph.turn.nodes.respond import respond
from hashkorea.graph.turn.nodes.search import search_places_node

__all__ = ["judge_turn", "respond", "search_places_node"]

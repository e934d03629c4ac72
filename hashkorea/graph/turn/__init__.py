"""대화 턴 그래프."""

from hashkorea.graph.turn.workflow import compiled_turn_graph

__all__ = ["compiled_turn_graph"]

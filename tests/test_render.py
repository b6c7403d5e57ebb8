"""
Tests for the matplotlib renderer helpers.
"""

import matplotlib.pyplot as plt
import pytest

from minimax_viz.graph import GraphNode, build_adjacency_list
from minimax_viz.render import (
    active_edges,
    draw_step,
    graph_layout,
    level_pos,
    node_colors,
    node_label,
    node_status_text,
)
from minimax_viz.state import NodeState
from minimax_viz.stepper import MinimaxSession
from minimax_viz.graphs import no_cycles, with_cycle


@pytest.mark.parametrize("state,score,expected", [
    (NodeState.UNVISITED, None, ("white", "gray")),
    (NodeState.QUEUED, None, ("gainsboro", "gray")),
    (NodeState.END_PROCESSING, None, ("cornflowerblue", "cornflowerblue")),
    (NodeState.VISITED, 1, ("green", "green")),
    (NodeState.VISITED, -1, ("red", "red")),
    (NodeState.VISITED, 0, ("sandybrown", "sienna")),
])
def test_node_colors(state, score, expected):
    assert node_colors(state, score) == expected


def test_status_text():
    assert node_status_text(NodeState.CALCULATE_SCORE, None) == "Waiting for children results"
    assert node_status_text(NodeState.VISITED, 1) == "Max wins"
    assert node_status_text(NodeState.VISITED, -1) == "Min wins"
    assert node_status_text(NodeState.VISITED, 0) == "Draw"


def test_label_shows_unknown_score():
    assert node_label("7", None) == "7\n?"
    assert node_label("7", -1) == "7\n-1"


def test_layout_uses_declared_positions():
    nodes = {n.id: n for n in no_cycles()}
    pos = graph_layout(nodes, build_adjacency_list(no_cycles()))
    assert pos["3"] == (-200, -100)


def test_level_layout_places_every_node():
    adj = build_adjacency_list([
        GraphNode("r", ["a"]),
        GraphNode("a", [], score=0),
        GraphNode("x", ["y"]),
        GraphNode("y", ["x"]),
    ])
    pos = level_pos(adj)
    assert set(pos) == {"r", "a", "x", "y"}
    assert pos["r"][1] > pos["a"][1] > pos["x"][1]


def test_active_edges_follow_highlights():
    session = MinimaxSession("cycleDetection", with_cycle())
    for _ in range(3):
        session.advance()
    # the parents of terminal node 9 are being queued
    assert session.current.show_node_parent == "9"
    assert sorted(active_edges(session.state.adj, session.current)) == [("13", "9"), ("4", "9")]


def test_draw_step_builds_figure():
    session = MinimaxSession("regular", with_cycle())
    for _ in range(6):
        session.advance()
    fig = draw_step(session.state.nodes, session.state.adj, session.current, title="Step 6")
    try:
        ax = fig.axes[0]
        assert ax.get_title() == "Step 6"
        assert any(t.get_text() == "1\n?" for t in ax.texts)
    finally:
        plt.close(fig)


def test_import_leaves_backend_alone(monkeypatch):
    import importlib

    import matplotlib

    from minimax_viz import render

    calls = []
    monkeypatch.setattr(matplotlib, "use", lambda *a, **kw: calls.append(a))
    importlib.reload(render)
    assert calls == []

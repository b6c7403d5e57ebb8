"""
Tests for the acyclic (post-order DFS) engine.
"""

import pytest

from minimax_viz import minimax
from minimax_viz.errors import InvariantViolation
from minimax_viz.graph import GraphNode, prepare_graph
from minimax_viz.state import MinimaxStatus, NodeState, initialize_traversal

NO_CYCLE_SCORES = {
    "1": 0, "2": -1, "3": 0, "4": -1, "5": 0, "6": 1,
    "7": 0, "8": -1, "10": 1, "11": 0, "12": 1,
}


def test_opening_steps(no_cycle_nodes):
    state = initialize_traversal(no_cycle_nodes)
    seen = []
    for _ in range(10):
        minimax.advance(state)
        seen.append(state.description)
    assert seen == [
        "Push the initial node into the stack",
        "Queued node: 1",
        "Ready to start navigating the graph",
        "Popped node 1 from the stack",
        "Process node children 2,3,4",
        "Node 2 not visited yet so it's pushed into the stack",
        "Node 3 not visited yet so it's pushed into the stack",
        "Node 4 not visited yet so it's pushed into the stack",
        "All children processed",
        "Popped node 4 from the stack",
    ]
    assert state.stack == ["1", "2", "3"]
    assert state.node_states["1"] is NodeState.CALCULATE_SCORE
    assert state.node_states["4"] is NodeState.START_PROCESSING


def test_status_moves_forward(no_cycle_nodes):
    state = initialize_traversal(no_cycle_nodes)
    assert state.status is MinimaxStatus.INIT
    minimax.advance(state)
    assert state.status is MinimaxStatus.INIT
    minimax.advance(state)
    assert state.status is MinimaxStatus.IN_PROGRESS


def test_no_cycle_scores(no_cycle_nodes, run_engine):
    state, descriptions = run_engine("regular", no_cycle_nodes)
    assert state.node_scores == NO_CYCLE_SCORES
    assert all(s is NodeState.VISITED for s in state.node_states.values())
    assert descriptions[-1] == "Finished"


def test_sample_min_and_max_nodes(no_cycle_nodes, run_engine):
    state, _ = run_engine("regular", no_cycle_nodes)
    scores = state.node_scores
    assert scores["2"] == min(scores["7"], -1)
    assert scores["1"] == max(scores["2"], scores["3"], scores["4"])


def test_finish_clears_highlights(no_cycle_nodes, run_engine):
    state, _ = run_engine("regular", no_cycle_nodes)
    assert state.status is MinimaxStatus.FINISHED
    assert state.selected_node is None
    assert state.show_node_children is None
    assert state.show_node_parent is None
    assert state.stack == []


def test_advance_after_finish_is_noop(no_cycle_nodes, run_engine):
    state, _ = run_engine("regular", no_cycle_nodes)
    before = state.snapshot()
    minimax.advance(state)
    minimax.advance(state)
    assert state.snapshot() == before


def test_cycle_nodes_score_as_draw(cycle_nodes, run_engine):
    state, descriptions = run_engine("regular", cycle_nodes)
    scores = state.node_scores
    assert "Cycle detected: setting score to a draw" in descriptions
    assert scores["14"] == 0
    assert scores["17"] == 0
    assert scores["13"] == -1
    assert scores["4"] == -1
    assert scores["1"] == 0


def test_revisited_node_is_a_counted_step(cycle_nodes, run_engine):
    _, descriptions = run_engine("regular", cycle_nodes)
    assert "Node 14 already solved, skipping..." in descriptions
    assert "Node 14 already in stack but we push it again to solve it before coming back to the parent" in descriptions


def test_self_loop_terminates_with_draw(self_loop_nodes, run_engine):
    state, descriptions = run_engine("regular", self_loop_nodes(-1))
    assert state.node_scores == {"r": 0, "a": 0, "t": -1}
    assert "Node a waiting for children, we found a cycle..." in descriptions


def test_single_terminal_graph(run_engine):
    state, descriptions = run_engine("regular", prepare_graph([GraphNode("only", [], score=1)]))
    assert state.node_scores == {"only": 1}
    assert "Terminal state where the score is 1" in descriptions


def test_child_mid_processing_is_invariant_violation():
    state = initialize_traversal(prepare_graph([GraphNode("r", ["x"]), GraphNode("x", [], score=1)]))
    for _ in range(5):
        minimax.advance(state)
    assert state.description == "Process node children x"
    state.node_states["x"] = NodeState.PROCESS_CHILDREN
    with pytest.raises(InvariantViolation, match="child x"):
        minimax.advance(state)


def test_self_loop_without_starting_node(sourceless_self_loop, run_engine):
    state, descriptions = run_engine("regular", sourceless_self_loop)
    assert state.node_scores == {"a": 0, "t": -1}
    assert descriptions[1] == "Ready to start navigating the graph"
    assert descriptions[2] == "Node a can't be reached from a starting node, pushing it into the stack"


def test_unreached_cycle_is_scored(unreached_cycle_nodes, run_engine):
    state, _ = run_engine("regular", unreached_cycle_nodes)
    assert state.node_scores == {"r": 1, "t1": 1, "x": 0, "y": 0, "t2": -1}
    assert all(s is NodeState.VISITED for s in state.node_states.values())

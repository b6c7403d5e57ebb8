"""
Shared fixtures for the minimax tests.
"""

import matplotlib
import pytest

matplotlib.use("Agg")

from minimax_viz.graph import GraphNode, prepare_graph
from minimax_viz.graphs import no_cycles, with_cycle
from minimax_viz.state import initialize_traversal
from minimax_viz.stepper import step

MAX_STEPS = 5000


@pytest.fixture
def no_cycle_nodes():
    return prepare_graph(no_cycles())


@pytest.fixture
def cycle_nodes():
    return prepare_graph(with_cycle())


@pytest.fixture
def self_loop_nodes():
    """r -> a, a -> {a, t}; t's score is filled in by the test."""
    def build(t_score):
        return prepare_graph([
            GraphNode("r", ["a"]),
            GraphNode("a", ["a", "t"]),
            GraphNode("t", [], score=t_score),
        ])
    return build


@pytest.fixture
def run_engine():
    """Step an algorithm to completion; returns (state, descriptions)."""
    def run(algorithm, nodes):
        state = initialize_traversal(nodes)
        descriptions = []
        for _ in range(MAX_STEPS):
            if state.finished:
                break
            step(algorithm, state)
            descriptions.append(state.description)
        assert state.finished, "traversal did not finish"
        return state, descriptions
    return run


@pytest.fixture
def sourceless_self_loop():
    """a -> {a, t}: the self-loop leaves no node without incoming edges."""
    return prepare_graph([GraphNode("a", ["a", "t"]), GraphNode("t", [], score=-1)])


@pytest.fixture
def unreached_cycle_nodes():
    """r -> t1 plus an x <-> y cycle that no starting node reaches."""
    return prepare_graph([
        GraphNode("r", ["t1"]),
        GraphNode("t1", [], score=1),
        GraphNode("x", ["y"]),
        GraphNode("y", ["x", "t2"]),
        GraphNode("t2", [], score=-1),
    ])

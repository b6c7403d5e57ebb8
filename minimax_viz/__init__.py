"""Step-by-step minimax over game graphs that may contain cycles

- graph: GraphNode and the adjacency-list utilities
- state: NodeState, MinimaxStatus, TraversalState and snapshots
- minimax / minimax_cycle: the two stepping engines
- stepper: step() dispatch and MinimaxSession
"""

from .errors import ConfigError, InvariantViolation, MalformedGraphError, MinimaxError
from .graph import (
    GraphNode,
    assign_levels,
    build_adjacency_list,
    find_starting_nodes,
    invert_graph,
    prepare_graph,
    sorted_children,
)
from .graphs import GRAPHS, load_graph
from .state import MinimaxStatus, NodeState, Step, TraversalState, initialize_traversal
from .stepper import ALGORITHMS, MinimaxSession, step

__all__ = [
    # Errors
    "MinimaxError",
    "MalformedGraphError",
    "InvariantViolation",
    "ConfigError",
    # Graph
    "GraphNode",
    "assign_levels",
    "build_adjacency_list",
    "find_starting_nodes",
    "invert_graph",
    "prepare_graph",
    "sorted_children",
    "GRAPHS",
    "load_graph",
    # Traversal
    "MinimaxStatus",
    "NodeState",
    "Step",
    "TraversalState",
    "initialize_traversal",
    "ALGORITHMS",
    "MinimaxSession",
    "step",
]

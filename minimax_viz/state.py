import copy
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Dict, List, Optional

from .errors import MalformedGraphError
from .graph import AdjList, GraphNode, build_adjacency_list, validate_nodes


class NodeState(Enum):
    UNVISITED = "unvisited"
    QUEUED = "queued"
    START_PROCESSING = "start_processing"
    PROCESS_CHILDREN = "process_children"
    CALCULATE_SCORE = "calculate_score"
    END_PROCESSING = "end_processing"
    VISITED = "visited"


class MinimaxStatus(Enum):
    INIT = "init"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass
class Cursor:
    """Where an engine resumes on the next ``advance`` call."""
    phase: Optional[Enum] = None
    node: Optional[str] = None          # node whose children are being walked
    children: List[str] = field(default_factory=list)
    index: int = 0
    ready: int = 0                      # resolved, non-forcing children seen
    forced: Optional[int] = None
    parents: List[str] = field(default_factory=list)
    parent_index: int = 0
    sinks: List[str] = field(default_factory=list)
    sink_index: int = 0


@dataclass
class Step:
    """Read-only copy of the traversal handed to the renderer."""
    description: str
    status: MinimaxStatus
    selected_node: Optional[str]
    show_node_children: Optional[str]
    show_node_parent: Optional[str]
    node_states: Dict[str, NodeState]
    node_scores: Dict[str, Optional[int]]
    pending: List[str]


@dataclass
class TraversalState:
    adj: AdjList
    nodes: Dict[str, GraphNode]
    node_states: Dict[str, NodeState]
    node_scores: Dict[str, Optional[int]]
    description: str = ""
    status: MinimaxStatus = MinimaxStatus.INIT
    selected_node: Optional[str] = None       # node to highlight
    show_node_children: Optional[str] = None  # node whose children are shown
    show_node_parent: Optional[str] = None    # node whose parents are shown
    stack: List[str] = field(default_factory=list)
    queue: Deque[str] = field(default_factory=deque)
    inverse: Optional[AdjList] = None
    cursor: Cursor = field(default_factory=Cursor)

    @property
    def finished(self) -> bool:
        return self.status is MinimaxStatus.FINISHED

    def is_max(self, node_id: str) -> bool:
        return self.nodes[node_id].is_max

    def fixed_score(self, node_id: str) -> int:
        node = self.nodes.get(node_id)
        if node is None or node.score is None:
            raise MalformedGraphError(f"Expected terminal node with score for node {node_id}")
        return node.score

    def clear_highlights(self) -> None:
        self.selected_node = None
        self.show_node_children = None
        self.show_node_parent = None

    def snapshot(self) -> Step:
        return Step(
            description=self.description,
            status=self.status,
            selected_node=self.selected_node,
            show_node_children=self.show_node_children,
            show_node_parent=self.show_node_parent,
            node_states=dict(self.node_states),
            node_scores=dict(self.node_scores),
            pending=list(self.stack) + list(self.queue),
        )


def initialize_traversal(nodes: List[GraphNode]) -> TraversalState:
    """Build a fresh traversal state for ``nodes``.

    Raises MalformedGraphError right away if a terminal node has no score.
    """
    validate_nodes(nodes)
    adj = build_adjacency_list(nodes)
    return TraversalState(
        adj=adj,
        nodes={n.id: copy.deepcopy(n) for n in nodes},
        node_states={nid: NodeState.UNVISITED for nid in adj},
        node_scores={nid: None for nid in adj},
    )

import copy
import logging
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

import networkx as nx

from .errors import MalformedGraphError

logger = logging.getLogger(__name__)

AdjList = Dict[str, Set[str]]

# =========================
# Data structures
# =========================
@dataclass
class GraphNode:
    id: str
    edges: List[str] = field(default_factory=list)   # ids of child states
    is_max: bool = True                              # set from the BFS level
    score: Optional[int] = None                      # only meaningful on terminal nodes
    position: Optional[Tuple[float, float]] = None   # layout hint for the renderer

    @property
    def is_terminal(self) -> bool:
        return not self.edges

# =========================
# Adjacency helpers
# =========================
def build_adjacency_list(nodes: Iterable[GraphNode]) -> AdjList:
    """Map every node id (source or target) to the set of its children.

    A repeated id replaces the edges of the earlier declaration.
    """
    adj: AdjList = {}
    seen: Set[str] = set()
    for node in nodes:
        if node.id in seen:
            logger.warning("Duplicate node id %s, keeping the last declaration", node.id)
        seen.add(node.id)
        adj[node.id] = set()
        for target in node.edges:
            adj.setdefault(target, set())
            adj[node.id].add(target)
    return adj

def find_starting_nodes(adj: AdjList) -> List[str]:
    """Ids with no incoming edges, in the adjacency list's key order."""
    targets = set()
    for children in adj.values():
        targets.update(children)
    return [nid for nid in adj if nid not in targets]

def invert_graph(adj: AdjList) -> AdjList:
    """Reverse every edge. Nodes without edges are kept, in the same key order."""
    inverted: AdjList = {nid: set() for nid in adj}
    for nid, children in adj.items():
        for child in children:
            inverted.setdefault(child, set()).add(nid)
    return inverted

def sorted_children(ids: Optional[Iterable[str]]) -> List[str]:
    # lexicographic on the id string: "10" comes before "8"
    if ids is None:
        return []
    return sorted(ids)

def to_digraph(adj: AdjList) -> nx.DiGraph:
    G = nx.DiGraph()
    G.add_nodes_from(adj)
    for nid, children in adj.items():
        for child in sorted_children(children):
            G.add_edge(nid, child)
    return G

# =========================
# Levels & validation
# =========================
def bfs(nodes: List[GraphNode], cb: Callable[[GraphNode, int], GraphNode]) -> List[GraphNode]:
    """Walk the graph breadth-first from its starting nodes.

    ``cb(node, level)`` is called once per reachable node with the level at
    which the node was first discovered; deep copies of its results are
    returned in visiting order.
    """
    adj = build_adjacency_list(nodes)
    node_map = {n.id: n for n in nodes}
    queue = deque(find_starting_nodes(adj))
    levels: Dict[str, int] = {nid: 0 for nid in queue}
    out: List[GraphNode] = []

    while queue:
        nid = queue.popleft()
        node = node_map.get(nid)
        if node is None:
            raise MalformedGraphError(f"Node {nid} is referenced by an edge but never declared")
        out.append(copy.deepcopy(cb(node, levels[nid])))
        for child in sorted_children(adj[nid]):
            if child not in levels:
                levels[child] = levels[nid] + 1
                queue.append(child)
    return out

def validate_nodes(nodes: List[GraphNode]) -> None:
    """Every terminal node, declared or only referenced, needs a score."""
    node_map = {n.id: n for n in nodes}
    for nid in build_adjacency_list(nodes):
        node = node_map.get(nid)
        if node is None or (node.is_terminal and node.score is None):
            raise MalformedGraphError(f"Terminal nodes are expected to have score: in node {nid}")

def assign_levels(nodes: List[GraphNode]) -> List[GraphNode]:
    """Copy the nodes with ``is_max`` set on even BFS levels.

    Nodes that no starting node reaches keep their declared ``is_max``.
    """
    node_map = {n.id: n for n in nodes}
    leveled = {n.id: n for n in bfs(list(node_map.values()),
                                   lambda n, level: replace(n, is_max=(level % 2 == 0)))}
    out = []
    for nid, node in node_map.items():
        if nid not in leveled:
            logger.warning("Node %s is not reachable from any starting node", nid)
            out.append(copy.deepcopy(node))
        else:
            out.append(leveled[nid])
    return out

def prepare_graph(nodes: List[GraphNode]) -> List[GraphNode]:
    validate_nodes(nodes)
    return assign_levels(nodes)

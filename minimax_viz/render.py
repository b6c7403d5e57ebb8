from collections import defaultdict, deque
from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
import networkx as nx

from .graph import AdjList, GraphNode, find_starting_nodes, sorted_children, to_digraph
from .state import NodeState, Step

HIGHLIGHT = "#ffd166"   # selected node ring
EDGE = "#333333"
EDGE_ACTIVE = "#d55"

# =========================
# Colors & labels
# =========================
def node_colors(state: NodeState, score: Optional[int]) -> Tuple[str, str]:
    """(fill, border) for a node."""
    if state is NodeState.UNVISITED:
        return "white", "gray"
    if state is NodeState.QUEUED:
        return "gainsboro", "gray"
    if state is NodeState.START_PROCESSING:
        return "gainsboro", "cornflowerblue"
    if state is NodeState.PROCESS_CHILDREN:
        return "white", "cornflowerblue"
    if state in (NodeState.CALCULATE_SCORE, NodeState.END_PROCESSING):
        return "cornflowerblue", "cornflowerblue"
    if state is NodeState.VISITED:
        if score is not None and score > 0:
            return "green", "green"
        if score is not None and score < 0:
            return "red", "red"
        return "sandybrown", "sienna"
    raise ValueError(f'Unhandled state "{state}"')

def node_status_text(state: NodeState, score: Optional[int]) -> str:
    if state is NodeState.UNVISITED:
        return "Unvisited"
    if state is NodeState.QUEUED:
        return "Queued"
    if state is NodeState.START_PROCESSING:
        return "Start processing"
    if state is NodeState.PROCESS_CHILDREN:
        return "Processing children"
    if state in (NodeState.CALCULATE_SCORE, NodeState.END_PROCESSING):
        return "Waiting for children results"
    if state is NodeState.VISITED:
        if score is not None and score > 0:
            return "Max wins"
        if score is not None and score < 0:
            return "Min wins"
        return "Draw"
    raise ValueError(f'Unhandled state "{state}"')

def node_label(node_id: str, score: Optional[int]) -> str:
    return f"{node_id}\n{'?' if score is None else score}"

# =========================
# Layout
# =========================
def level_pos(adj: AdjList, width=2.8, vert_gap=0.28, vert_loc=1.0):
    """Rows by BFS level, nodes spread evenly on each row."""
    levels: Dict[str, int] = {}
    queue = deque(find_starting_nodes(adj))
    for nid in queue:
        levels[nid] = 0
    while queue:
        nid = queue.popleft()
        for child in sorted_children(adj[nid]):
            if child not in levels:
                levels[child] = levels[nid] + 1
                queue.append(child)
    # nodes only reachable through a cycle get a row of their own
    bottom = max(levels.values(), default=-1) + 1
    for nid in adj:
        levels.setdefault(nid, bottom)

    rows = defaultdict(list)
    for nid, level in levels.items():
        rows[level].append(nid)
    pos = {}
    for level, ids in rows.items():
        step = width / (len(ids) + 1)
        for i, nid in enumerate(ids):
            pos[nid] = (-width / 2 + step * (i + 1), vert_loc - level * vert_gap)
    return pos

def graph_layout(nodes: Dict[str, GraphNode], adj: AdjList):
    """Declared positions when every node has one (y grows downwards)."""
    if all(nodes.get(nid) is not None and nodes[nid].position is not None for nid in adj):
        return {nid: (nodes[nid].position[0], -nodes[nid].position[1]) for nid in adj}
    return level_pos(adj)

def active_edges(adj: AdjList, step: Step) -> List[Tuple[str, str]]:
    edges = []
    if step.show_node_children is not None:
        edges += [(step.show_node_children, c) for c in sorted_children(adj.get(step.show_node_children))]
    if step.show_node_parent is not None:
        edges += [(p, step.show_node_parent) for p in adj if step.show_node_parent in adj[p]]
    return edges

# =========================
# Drawing
# =========================
def draw_step(nodes: Dict[str, GraphNode], adj: AdjList, step: Step, title: str = "", compact: bool = True):
    fig_w = 8.0 if compact else 10.5
    fig_h = 5.0 if compact else 6.2
    node_size = 900 if compact else 1400
    font_size = 8 if compact else 10

    G = to_digraph(adj)
    pos = graph_layout(nodes, adj)

    fills, borders, labels = [], [], {}
    for nid in G.nodes():
        score = step.node_scores.get(nid)
        fill, border = node_colors(step.node_states[nid], score)
        fills.append(fill)
        borders.append(HIGHLIGHT if nid == step.selected_node else border)
        labels[nid] = node_label(nid, score)

    active = set(active_edges(adj, step))
    edge_colors = [EDGE_ACTIVE if e in active else EDGE for e in G.edges()]
    edge_widths = [2.0 if e in active else 1.0 for e in G.edges()]

    fig = plt.figure(figsize=(fig_w, fig_h))
    ax = plt.gca()
    ax.margins(0.08)

    nx.draw_networkx_nodes(G, pos, ax=ax, node_color=fills, edgecolors=borders,
                           linewidths=[4.0 if n == step.selected_node else 2.0 for n in G.nodes()],
                           node_size=node_size)
    nx.draw_networkx_edges(G, pos, ax=ax, edge_color=edge_colors, width=edge_widths,
                           arrows=True, arrowstyle="-|>", node_size=node_size,
                           connectionstyle="arc3,rad=0.1")
    nx.draw_networkx_labels(G, pos, labels, ax=ax, font_size=font_size)

    # max/min tag next to each node
    for nid, (x, y) in pos.items():
        node = nodes.get(nid)
        if node is not None:
            ax.annotate("max" if node.is_max else "min", (x, y), xytext=(12, 10),
                        textcoords="offset points", fontsize=font_size - 2, color="#666")

    ax.set_axis_off()
    plt.title(title)
    plt.tight_layout()
    return fig

"""
Cycle-tolerant minimax by retrograde analysis.

Terminal nodes are scored first and the engine works backwards through the
inverted graph with a FIFO queue. A node is only committed once its value is
forced (a child already gives the mover a win) or once every child is
resolved. Whatever is left when the queue runs dry can't force a result and is
scored as a draw.
"""

import logging
from enum import Enum

from .errors import InvariantViolation, MalformedGraphError
from .graph import find_starting_nodes, invert_graph, sorted_children
from .state import MinimaxStatus, NodeState, TraversalState

logger = logging.getLogger(__name__)


class Phase(Enum):
    ANNOUNCE = "announce"
    SEED_SINK = "seed_sink"
    SEED_PARENT = "seed_parent"
    READY = "ready"
    DEQUEUE = "dequeue"
    CHILD = "child"
    CHILDREN_DONE = "children_done"
    FORCE = "force"
    QUEUE_PARENTS = "queue_parents"
    QUEUE_PARENT = "queue_parent"
    SWEEP = "sweep"
    FINISH = "finish"
    DONE = "done"


def advance(state: TraversalState) -> None:
    """Run one micro-step of the cycle-tolerant engine. No-op once finished.

    Handlers return False when they only moved the cursor (e.g. a dequeued
    node was already solved), in which case the next handler runs right away.
    """
    cur = state.cursor
    if cur.phase is None:
        cur.phase = Phase.ANNOUNCE
    while cur.phase is not Phase.DONE:
        if _HANDLERS[cur.phase](state):
            logger.debug("cycleDetection: %s", state.description)
            return


def _favorable(is_max: bool, score: int) -> bool:
    return score > 0 if is_max else score < 0

# =========================
# Terminal nodes
# =========================
def _announce(state: TraversalState) -> bool:
    state.description = "Find all terminal nodes and set their scores"
    state.cursor.phase = Phase.SEED_SINK
    return True

def _seed_sink(state: TraversalState) -> bool:
    cur = state.cursor
    if state.status is MinimaxStatus.INIT:
        state.status = MinimaxStatus.IN_PROGRESS
        state.inverse = invert_graph(state.adj)
        cur.sinks = find_starting_nodes(state.inverse)
        cur.sink_index = 0
    if cur.sink_index >= len(cur.sinks):
        cur.phase = Phase.READY
        return False

    nid = cur.sinks[cur.sink_index]
    node = state.nodes.get(nid)
    if node is None or node.score is None:
        raise MalformedGraphError(f"Expected score for node {nid}")
    state.description = f"Terminal node {nid} with value: {node.score}"
    state.node_scores[nid] = node.score
    state.node_states[nid] = NodeState.VISITED
    state.selected_node = nid

    cur.sink_index += 1
    cur.parents = sorted_children(state.inverse.get(nid))
    cur.parent_index = 0
    cur.node = nid
    cur.phase = Phase.SEED_PARENT
    return True

def _seed_parent(state: TraversalState) -> bool:
    cur = state.cursor
    if cur.parent_index >= len(cur.parents):
        state.show_node_parent = None
        cur.phase = Phase.SEED_SINK
        return False
    state.show_node_parent = cur.node
    _queue_one(state, cur.parents[cur.parent_index])
    cur.parent_index += 1
    return True

def _ready(state: TraversalState) -> bool:
    state.description = "Ready to start navigating the graph backwards"
    state.selected_node = None
    state.cursor.phase = Phase.DEQUEUE
    return True

# =========================
# Backwards propagation
# =========================
def _dequeue(state: TraversalState) -> bool:
    cur = state.cursor
    if not state.queue:
        cur.phase = Phase.SWEEP
        return False
    nid = state.queue.popleft()
    if state.node_states[nid] is NodeState.VISITED:
        return False

    children = sorted_children(state.adj.get(nid))
    if not children:
        raise InvariantViolation(f"Node {nid} should have children")

    is_max = state.is_max(nid)
    state.node_states[nid] = NodeState.CALCULATE_SCORE
    state.selected_node = nid
    state.show_node_children = nid
    state.description = f"Check children to see if {'max' if is_max else 'min'} can win"

    cur.node = nid
    cur.children = children
    cur.index = 0
    cur.ready = 0
    cur.forced = None
    cur.phase = Phase.CHILD
    return True

def _child(state: TraversalState) -> bool:
    cur = state.cursor
    child = cur.children[cur.index]
    state.selected_node = child
    score = state.node_scores[child]

    if state.node_states[child] is not NodeState.VISITED or score is None:
        state.description = f"Node {child} is not ready, skip for now"
    elif _favorable(state.is_max(cur.node), score):
        # first child that wins for the mover decides
        state.description = "Can force a win, so we propagate the score"
        cur.forced = score
        cur.phase = Phase.FORCE
        return True
    else:
        cur.ready += 1
        state.description = "Can't force a win, continue looking..."

    cur.index += 1
    if cur.index >= len(cur.children):
        cur.phase = Phase.CHILDREN_DONE
    return True

def _force(state: TraversalState) -> bool:
    cur = state.cursor
    state.selected_node = cur.node
    state.node_scores[cur.node] = cur.forced
    state.node_states[cur.node] = NodeState.VISITED
    cur.phase = Phase.QUEUE_PARENTS
    return True

def _children_done(state: TraversalState) -> bool:
    cur = state.cursor
    if cur.ready < len(cur.children):
        # left unresolved until one of its children queues it again
        cur.phase = Phase.DEQUEUE
        return False

    nid = cur.node
    scores = [state.node_scores[c] for c in cur.children]
    f = max if state.is_max(nid) else min
    state.selected_node = nid
    state.description = ("All child nodes can force a result, so this means that this "
                         "node does not really have a choice")
    state.node_scores[nid] = f(scores)
    state.node_states[nid] = NodeState.VISITED
    cur.phase = Phase.QUEUE_PARENTS
    return True

def _queue_parents(state: TraversalState) -> bool:
    cur = state.cursor
    nid = cur.node
    state.selected_node = nid
    state.show_node_children = None
    cur.parents = sorted_children(state.inverse.get(nid))
    cur.parent_index = 0
    if cur.parents:
        state.show_node_parent = nid
        state.description = "Push parent nodes into the queue"
        cur.phase = Phase.QUEUE_PARENT
    else:
        state.show_node_parent = None
        state.description = "No parent nodes to push into the queue"
        cur.phase = Phase.DEQUEUE
    return True

def _queue_parent(state: TraversalState) -> bool:
    cur = state.cursor
    if cur.parent_index >= len(cur.parents):
        state.show_node_parent = None
        cur.phase = Phase.DEQUEUE
        return False
    _queue_one(state, cur.parents[cur.parent_index])
    cur.parent_index += 1
    return True

def _queue_one(state: TraversalState, parent: str) -> None:
    state.selected_node = parent
    parent_state = state.node_states[parent]
    if parent_state is NodeState.VISITED:
        state.description = f"Node {parent} already solved, do nothing"
    elif parent_state is NodeState.QUEUED:
        state.description = f"Node {parent} already in the queue, do nothing"
    else:
        state.description = f"Node {parent} into the queue"
        state.node_states[parent] = NodeState.QUEUED
        state.queue.append(parent)

# =========================
# Draws
# =========================
def _sweep(state: TraversalState) -> bool:
    state.clear_highlights()
    state.description = ("The rest of the nodes can't force a win/lose state, "
                         "so we can mark them as a draw")
    state.cursor.phase = Phase.FINISH
    return True

def _finish(state: TraversalState) -> bool:
    for nid, node_state in state.node_states.items():
        if node_state is not NodeState.VISITED:
            state.node_states[nid] = NodeState.VISITED
            state.node_scores[nid] = 0
    state.status = MinimaxStatus.FINISHED
    state.description = "Finished"
    state.clear_highlights()
    state.cursor.phase = Phase.DONE
    return True


_HANDLERS = {
    Phase.ANNOUNCE: _announce,
    Phase.SEED_SINK: _seed_sink,
    Phase.SEED_PARENT: _seed_parent,
    Phase.READY: _ready,
    Phase.DEQUEUE: _dequeue,
    Phase.CHILD: _child,
    Phase.CHILDREN_DONE: _children_done,
    Phase.FORCE: _force,
    Phase.QUEUE_PARENTS: _queue_parents,
    Phase.QUEUE_PARENT: _queue_parent,
    Phase.SWEEP: _sweep,
    Phase.FINISH: _finish,
}

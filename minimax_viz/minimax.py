"""
Acyclic minimax: iterative post-order DFS over an explicit stack.

Each call to ``advance`` performs one micro-step and leaves the traversal
state ready to render. A node is popped, its children are pushed above it and
it is revisited once they are done to pick the max/min of their scores. A child
that is still waiting for its own children closes a cycle; the waiting node is
then scored as a draw.
"""

import logging
from enum import Enum

from .errors import InvariantViolation
from .graph import find_starting_nodes, sorted_children
from .state import MinimaxStatus, NodeState, TraversalState

logger = logging.getLogger(__name__)


class Phase(Enum):
    ANNOUNCE = "announce"
    SEED = "seed"
    READY = "ready"
    POP = "pop"
    EXPAND = "expand"
    CHILD = "child"
    CHILDREN_DONE = "children_done"
    EVALUATE = "evaluate"
    AGGREGATE = "aggregate"
    COMMIT = "commit"
    DONE = "done"


def advance(state: TraversalState) -> None:
    """Run one micro-step of the acyclic engine. No-op once finished."""
    cur = state.cursor
    if cur.phase is None:
        cur.phase = Phase.ANNOUNCE
    if cur.phase is Phase.DONE:
        return
    _HANDLERS[cur.phase](state)
    logger.debug("regular: %s", state.description)

# =========================
# Seeding
# =========================
def _announce(state: TraversalState) -> None:
    state.description = "Push the initial node into the stack"
    state.cursor.phase = Phase.SEED

def _seed(state: TraversalState) -> None:
    cur = state.cursor
    if state.status is MinimaxStatus.INIT:
        state.status = MinimaxStatus.IN_PROGRESS
        state.stack = find_starting_nodes(state.adj)
        cur.index = 0
    if cur.index >= len(state.stack):
        _ready(state)
        return
    nid = state.stack[cur.index]
    state.node_states[nid] = NodeState.QUEUED
    state.description = f"Queued node: {nid}"
    state.selected_node = nid
    cur.index += 1
    if cur.index >= len(state.stack):
        cur.phase = Phase.READY

def _ready(state: TraversalState) -> None:
    state.description = "Ready to start navigating the graph"
    state.selected_node = None
    state.cursor.phase = Phase.POP

# =========================
# Main loop
# =========================
def _pop(state: TraversalState) -> None:
    cur = state.cursor
    if not state.stack:
        # parts of the graph no starting node reaches, e.g. a sourceless cycle
        unreached = next((nid for nid, s in state.node_states.items() if s is NodeState.UNVISITED), None)
        if unreached is not None:
            state.node_states[unreached] = NodeState.QUEUED
            state.stack.append(unreached)
            state.selected_node = unreached
            state.show_node_children = None
            state.description = f"Node {unreached} can't be reached from a starting node, pushing it into the stack"
            return
        state.status = MinimaxStatus.FINISHED
        state.description = "Finished"
        state.clear_highlights()
        cur.phase = Phase.DONE
        return

    nid = state.stack.pop()
    state.selected_node = nid
    state.show_node_children = None
    cur.node = nid

    node_state = state.node_states[nid]
    if node_state is NodeState.VISITED:
        state.description = f"Node {nid} already solved, skipping..."
    elif node_state is NodeState.CALCULATE_SCORE:
        state.description = "Children ready, time to calculate the score"
        state.node_states[nid] = NodeState.END_PROCESSING
        cur.phase = Phase.EVALUATE
    elif node_state in (NodeState.UNVISITED, NodeState.QUEUED):
        state.description = f"Popped node {nid} from the stack"
        state.node_states[nid] = NodeState.START_PROCESSING
        cur.phase = Phase.EXPAND
    else:
        raise InvariantViolation(f"Popped node {nid} while it is {node_state.value}")

def _expand(state: TraversalState) -> None:
    cur = state.cursor
    nid = cur.node
    state.show_node_children = nid
    state.node_states[nid] = NodeState.PROCESS_CHILDREN

    children = sorted_children(state.adj.get(nid))
    if not children:
        score = state.fixed_score(nid)
        state.description = f"Terminal state where the score is {score}"
        state.node_scores[nid] = score
        state.node_states[nid] = NodeState.VISITED
        cur.phase = Phase.POP
        return

    # revisit this node once the children above it are done
    state.stack.append(nid)
    state.description = f"Process node children {','.join(children)}"
    cur.children = children
    cur.index = 0
    cur.phase = Phase.CHILD

def _child(state: TraversalState) -> None:
    cur = state.cursor
    child = cur.children[cur.index]
    state.selected_node = child
    child_state = state.node_states[child]

    prefix = f"Node {child} "
    if child == cur.node or child_state is NodeState.CALCULATE_SCORE:
        state.description = prefix + "waiting for children, we found a cycle..."
    elif child_state is NodeState.UNVISITED:
        state.description = prefix + "not visited yet so it's pushed into the stack"
        state.node_states[child] = NodeState.QUEUED
        state.stack.append(child)
    elif child_state is NodeState.QUEUED:
        state.description = prefix + ("already in stack but we push it again to solve it "
                                      "before coming back to the parent")
        state.stack.append(child)
    elif child_state is NodeState.VISITED:
        state.description = prefix + "already solved, skipping..."
    else:
        raise InvariantViolation(f"Shouldn't reach this state: child {child} is {child_state.value}")

    cur.index += 1
    if cur.index >= len(cur.children):
        cur.phase = Phase.CHILDREN_DONE

def _children_done(state: TraversalState) -> None:
    cur = state.cursor
    state.description = "All children processed"
    state.node_states[cur.node] = NodeState.CALCULATE_SCORE
    state.selected_node = cur.node
    cur.phase = Phase.POP

# =========================
# Scoring
# =========================
def _evaluate(state: TraversalState) -> None:
    cur = state.cursor
    nid = cur.node
    children = sorted_children(state.adj.get(nid))
    ready = all(state.node_states[c] is NodeState.VISITED for c in children)
    if not ready:
        state.node_scores[nid] = 0
        state.description = "Cycle detected: setting score to a draw"
        cur.phase = Phase.COMMIT
    else:
        state.description = f"Picking {'max' if state.is_max(nid) else 'min'} score from children"
        cur.children = children
        cur.phase = Phase.AGGREGATE

def _aggregate(state: TraversalState) -> None:
    cur = state.cursor
    scores = [state.node_scores[c] for c in cur.children]
    f = max if state.is_max(cur.node) else min
    state.node_scores[cur.node] = f(scores)
    cur.phase = Phase.COMMIT

def _commit(state: TraversalState) -> None:
    cur = state.cursor
    state.description = f"node {cur.node} is done"
    state.node_states[cur.node] = NodeState.VISITED
    cur.phase = Phase.POP


_HANDLERS = {
    Phase.ANNOUNCE: _announce,
    Phase.SEED: _seed,
    Phase.READY: _ready,
    Phase.POP: _pop,
    Phase.EXPAND: _expand,
    Phase.CHILD: _child,
    Phase.CHILDREN_DONE: _children_done,
    Phase.EVALUATE: _evaluate,
    Phase.AGGREGATE: _aggregate,
    Phase.COMMIT: _commit,
}

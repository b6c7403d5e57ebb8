# Minimax over game graphs with cycles (three men's morris style state spaces).
# Run with: streamlit run app.py

import streamlit as st
import matplotlib.pyplot as plt

from minimax_viz.config import configure_logging, load_settings
from minimax_viz.errors import MinimaxError
from minimax_viz.graphs import GRAPHS, load_graph
from minimax_viz.render import draw_step, node_status_text
from minimax_viz.state import MinimaxStatus
from minimax_viz.stepper import ALGORITHMS, MinimaxSession

ALGO_LABELS = {
    "regular": "Regular (post-order DFS)",
    "cycleDetection": "Cycle detection (retrograde)",
}
GRAPH_LABELS = {
    "noCycles": "No cycles",
    "withCycle": "With cycles",
}

settings = load_settings()
configure_logging(settings)

# =========================
# Session helpers
# =========================
def _new_session(algorithm: str, graph: str):
    st.session_state.algo = algorithm
    st.session_state.graph = graph
    st.session_state.error = None
    try:
        st.session_state.session = MinimaxSession(algorithm, load_graph(graph))
    except MinimaxError as e:
        st.session_state.session = None
        st.session_state.error = str(e)

def _guarded(action):
    """Run a session action; an engine error stops further stepping."""
    try:
        action()
    except MinimaxError as e:
        st.session_state.error = str(e)

# =========================
# UI / Layout
# =========================
st.set_page_config(page_title="Minimax with cycles — Step Tutorial", layout="wide")

st.markdown("<h1 style='text-align: center; margin-bottom:0;'>Minimax on graphs with cycles</h1>",
            unsafe_allow_html=True)
st.caption("Step through minimax one micro-step at a time. Green = max wins, red = min wins, brown = draw.")

if "session" not in st.session_state:
    _new_session(settings.algorithm, settings.graph)

c1, c2 = st.columns([1, 1])
with c1:
    algo = st.radio("Algorithm", list(ALGORITHMS), horizontal=True,
                    index=list(ALGORITHMS).index(st.session_state.algo),
                    format_func=ALGO_LABELS.get)
with c2:
    graph = st.radio("Graph", list(GRAPHS), horizontal=True,
                     index=list(GRAPHS).index(st.session_state.graph),
                     format_func=GRAPH_LABELS.get)

if algo != st.session_state.algo or graph != st.session_state.graph:
    _new_session(algo, graph)

session = st.session_state.session
if session is None:
    st.error(st.session_state.error)
    st.stop()

stopped = st.session_state.error is not None

n1, n2, n3, n4, n5 = st.columns([1, 1, 1, 1, 2])
with n1:
    if st.button("⟵ Back", use_container_width=True):
        session.back()
with n2:
    if st.button("Next ⟶", use_container_width=True, disabled=stopped and session.at_latest):
        _guarded(session.advance)
with n3:
    if st.button("Run to end", use_container_width=True, disabled=stopped):
        _guarded(session.run_to_end)
with n4:
    if st.button("Reset", use_container_width=True):
        session.restart()
        st.session_state.error = None
with n5:
    st.write(f"Step {session.position} / {len(session.history) - 1}"
             + (" (finished)" if session.finished else ""))

if st.session_state.error:
    st.error(f"Traversal stopped: {st.session_state.error}")

step = session.current
fig = draw_step(
    session.state.nodes, session.state.adj, step,
    title=f"{ALGO_LABELS[st.session_state.algo]} — Step {session.position}",
)
st.pyplot(fig, use_container_width=True)
plt.close(fig)

with st.expander("What is happening in this step?", expanded=True):
    st.write(step.description or "Press **Next** to start.")
    if step.selected_node is not None:
        st.markdown(f"**Current node:** {step.selected_node}")
    if step.pending:
        st.markdown(f"**Pending ({'stack' if st.session_state.algo == 'regular' else 'queue'}):** "
                    + ", ".join(step.pending))
    if step.status is MinimaxStatus.FINISHED:
        st.success("Finished: every node has a score.")

with st.expander("Node states"):
    rows = []
    for node in session.nodes:
        score = step.node_scores.get(node.id)
        rows.append({
            "node": node.id,
            "turn": "max" if node.is_max else "min",
            "state": node_status_text(step.node_states[node.id], score),
            "score": "?" if score is None else score,
        })
    st.table(rows)

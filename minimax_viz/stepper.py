import logging
from typing import Callable, Dict, List, Optional

from . import minimax, minimax_cycle
from .errors import ConfigError, InvariantViolation
from .graph import GraphNode, prepare_graph
from .state import Step, TraversalState, initialize_traversal

logger = logging.getLogger(__name__)

ALGORITHMS = ("regular", "cycleDetection")

_ENGINES: Dict[str, Callable[[TraversalState], None]] = {
    "regular": minimax.advance,
    "cycleDetection": minimax_cycle.advance,
}


def check_algorithm(algorithm: str) -> str:
    if algorithm not in _ENGINES:
        raise ConfigError(f'Invalid algorithm "{algorithm}". Expected any of {", ".join(ALGORITHMS)}')
    return algorithm


def step(algorithm: str, state: TraversalState) -> None:
    """Advance ``state`` by exactly one micro-step of ``algorithm``."""
    _ENGINES[check_algorithm(algorithm)](state)


class MinimaxSession:
    """Steps one algorithm over one graph and keeps every rendered snapshot.

    ``history[i]`` is the state after ``i`` steps; ``position`` is the
    snapshot currently shown, so Back/Next can move through steps that were
    already computed without touching the traversal.
    """

    def __init__(self, algorithm: str, nodes: List[GraphNode]):
        self.algorithm = check_algorithm(algorithm)
        self.nodes = prepare_graph(nodes)
        self.error: Optional[InvariantViolation] = None
        self._start()

    def _start(self) -> None:
        self.state = initialize_traversal(self.nodes)
        self.history: List[Step] = [self.state.snapshot()]
        self.position = 0
        self.error = None
        logger.info("Started %s traversal over %d nodes", self.algorithm, len(self.state.adj))

    @property
    def current(self) -> Step:
        return self.history[self.position]

    @property
    def finished(self) -> bool:
        return self.state.finished

    @property
    def at_latest(self) -> bool:
        return self.position == len(self.history) - 1

    def advance(self) -> Step:
        """Show the next step, computing it if it hasn't been reached yet."""
        if not self.at_latest:
            self.position += 1
            return self.current
        if self.error is not None:
            raise self.error
        if self.finished:
            return self.current
        try:
            step(self.algorithm, self.state)
        except InvariantViolation as e:
            logger.exception("Traversal halted after %d steps", len(self.history) - 1)
            self.error = e
            raise
        self.history.append(self.state.snapshot())
        self.position = len(self.history) - 1
        if self.finished:
            logger.info("%s traversal finished in %d steps", self.algorithm, self.position)
        return self.current

    def back(self) -> Step:
        self.position = max(0, self.position - 1)
        return self.current

    def restart(self) -> Step:
        logger.info("Restarting %s traversal", self.algorithm)
        self._start()
        return self.current

    def run_to_end(self, max_steps: int = 10_000) -> Step:
        """Advance until finished. ``max_steps`` bounds a runaway traversal."""
        self.position = len(self.history) - 1
        for _ in range(max_steps):
            if self.finished:
                break
            self.advance()
        return self.current

from typing import Callable, Dict, List

from .errors import ConfigError
from .graph import GraphNode


def no_cycles() -> List[GraphNode]:
    # Small acyclic game graph for the first walkthrough
    return [
        GraphNode("1", ["2", "3", "4"], position=(0, 0)),
        GraphNode("2", ["7", "8"], position=(0, 100)),
        GraphNode("3", ["5", "6"], position=(-200, 100)),
        GraphNode("4", ["8", "10"], position=(200, 100)),
        GraphNode("5", [], score=0, position=(-250, 200)),
        GraphNode("6", ["12"], position=(-150, 200)),
        GraphNode("7", ["11"], position=(-50, 200)),
        GraphNode("8", [], score=-1, position=(100, 200)),
        GraphNode("10", [], score=1, position=(250, 200)),
        GraphNode("11", [], score=0, position=(-50, 300)),
        GraphNode("12", [], score=1, position=(-150, 300)),
    ]


def with_cycle() -> List[GraphNode]:
    # Two loops: 90→7→11→12→13→14→90 and 10→15→16→17→10
    return [
        GraphNode("1", ["90", "4", "14"], position=(0, 0)),
        GraphNode("90", ["7"], position=(-50, 100)),
        GraphNode("4", ["9", "10"], position=(200, 100)),
        GraphNode("7", ["11"], position=(-50, 200)),
        GraphNode("9", [], score=-1, position=(150, 200)),
        GraphNode("10", ["15"], position=(250, 200)),
        GraphNode("11", ["12"], position=(-50, 300)),
        GraphNode("12", ["13"], position=(50, 300)),
        GraphNode("13", ["14", "9"], position=(50, 200)),
        GraphNode("14", ["90"], position=(50, 100)),
        GraphNode("15", ["16"], position=(300, 300)),
        GraphNode("16", ["17"], position=(350, 200)),
        GraphNode("17", ["10"], position=(300, 100)),
    ]


GRAPHS: Dict[str, Callable[[], List[GraphNode]]] = {
    "noCycles": no_cycles,
    "withCycle": with_cycle,
}


def load_graph(name: str) -> List[GraphNode]:
    if name not in GRAPHS:
        raise ConfigError(f'Invalid graph "{name}". Expected any of {", ".join(GRAPHS)}')
    return GRAPHS[name]()

"""Print the narration of a traversal: python -m minimax_viz --algorithm cycleDetection"""

import argparse
import sys
from typing import List, Optional

from .config import configure_logging, load_settings
from .errors import ConfigError, MinimaxError
from .graphs import GRAPHS, load_graph
from .stepper import ALGORITHMS, MinimaxSession


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Step through minimax on a sample game graph.")
    parser.add_argument("--algorithm", choices=ALGORITHMS, default=settings.algorithm)
    parser.add_argument("--graph", choices=sorted(GRAPHS), default=settings.graph)
    parser.add_argument("--max-steps", type=int, default=10_000,
                        help="Stop after this many micro-steps.")
    parser.add_argument("--quiet", action="store_true",
                        help="Only print the final scores.")
    args = parser.parse_args(argv)
    args.log_level = settings.log_level
    return args


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args = parse_args(argv)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    configure_logging(load_settings({"MINIMAX_LOG_LEVEL": args.log_level}))

    try:
        session = MinimaxSession(args.algorithm, load_graph(args.graph))
        for i in range(1, args.max_steps + 1):
            if session.finished:
                break
            step = session.advance()
            if not args.quiet:
                print(f"{i:4d}  {step.description}")
    except MinimaxError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print()
    print(f"{'node':>6}  {'turn':>4}  score")
    for node in session.nodes:
        score = session.current.node_scores.get(node.id)
        print(f"{node.id:>6}  {'max' if node.is_max else 'min':>4}  {'?' if score is None else score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

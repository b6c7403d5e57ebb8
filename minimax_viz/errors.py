"""
Exceptions raised by the minimax stepper.
"""


class MinimaxError(Exception):
    """Base exception for traversal errors."""

    pass


class MalformedGraphError(MinimaxError):
    """Raised when a graph can't be traversed, e.g. a terminal node without a score."""

    pass


class InvariantViolation(MinimaxError):
    """Raised when an engine reaches a state that should be unreachable."""

    pass


class ConfigError(MinimaxError, ValueError):
    """Raised for an unknown algorithm or graph name."""

    pass

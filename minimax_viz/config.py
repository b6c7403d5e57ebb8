"""Runtime settings for the visualizer

Read from the environment so the same graph/algorithm can be preselected for
both the Streamlit app and the CLI:

- MINIMAX_ALGORITHM: "regular" or "cycleDetection" (default "regular")
- MINIMAX_GRAPH: sample graph name (default "noCycles")
- MINIMAX_LOG_LEVEL: logging level name (default "INFO")
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigError
from .graphs import GRAPHS
from .stepper import check_algorithm


@dataclass
class Settings:
    """Visualizer settings.

    Attributes:
        algorithm: Engine used for the whole session
        graph: Name of the sample graph in ``GRAPHS``
        log_level: Level passed to ``logging.basicConfig``
    """

    algorithm: str = "regular"
    graph: str = "noCycles"
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from ``environ`` (defaults to ``os.environ``).

    Empty variables fall back to the defaults.

    Raises:
        ConfigError: unknown algorithm, graph or log level
    """
    env = os.environ if environ is None else environ
    defaults = Settings()
    settings = Settings(
        algorithm=env.get("MINIMAX_ALGORITHM") or defaults.algorithm,
        graph=env.get("MINIMAX_GRAPH") or defaults.graph,
        log_level=(env.get("MINIMAX_LOG_LEVEL") or defaults.log_level).upper(),
    )
    check_algorithm(settings.algorithm)
    if settings.graph not in GRAPHS:
        raise ConfigError(f'Invalid graph "{settings.graph}". Expected any of {", ".join(GRAPHS)}')
    if not isinstance(logging.getLevelName(settings.log_level), int):
        raise ConfigError(f'Invalid log level "{settings.log_level}"')
    return settings


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

# str_checker/config.py
"""
Tuning knobs for exploration runs, and logging setup.
"""

from __future__ import annotations

import dataclasses
import logging
import sys
from dataclasses import dataclass
from typing import Any, List, Optional

from .errors import InvalidConfigError

STRATEGIES = ("bfs", "dfs")


@dataclass(frozen=True)
class ExplorationConfig:
    """Tuning knobs for :class:`~str_checker.exploration.Reachability`.

    ``max_configurations`` and ``max_seconds`` form the exploration budget;
    ``None`` means unbounded, in which case exploration of an infinite
    reachable set does not terminate.
    """

    max_configurations: Optional[int] = None
    max_seconds: Optional[float] = None
    strategy: str = "bfs"
    raise_on_budget: bool = False
    log_every: int = 10_000

    def validate(self) -> List[str]:
        """Return a list of validation problems (empty if valid)."""
        problems: List[str] = []
        if self.max_configurations is not None and self.max_configurations <= 0:
            problems.append("max_configurations must be positive")
        if self.max_seconds is not None and self.max_seconds <= 0:
            problems.append("max_seconds must be positive")
        if self.strategy not in STRATEGIES:
            problems.append(
                f"strategy must be one of {', '.join(STRATEGIES)}, "
                f"not {self.strategy!r}"
            )
        if self.log_every <= 0:
            problems.append("log_every must be positive")
        return problems

    def check(self) -> "ExplorationConfig":
        """Raise :class:`InvalidConfigError` unless the config is valid."""
        problems = self.validate()
        if problems:
            raise InvalidConfigError(problems)
        return self

    def replace(self, **changes: Any) -> "ExplorationConfig":
        return dataclasses.replace(self, **changes)

    @property
    def bounded(self) -> bool:
        return self.max_configurations is not None or self.max_seconds is not None


def configure_logging(verbosity: int = 0) -> logging.Logger:
    """Set up the package-level ``str_checker`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("str_checker")
    root.setLevel(level)
    if not any(getattr(h, "_str_checker", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        handler._str_checker = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    return root


__all__ = ["ExplorationConfig", "STRATEGIES", "configure_logging"]

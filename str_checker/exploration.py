# str_checker/exploration.py
"""
Explicit-state exploration over rooted graphs.

This module provides:
  - ReachableSet: the per-run set of discovered configurations
  - ParentTracer: first-discovery parent records and trace reconstruction
  - ExplorationRun: one incremental exploration, consumable as an iterator
  - Reachability: the engine; ``run(rg)`` explores to completion

The search starts from the roots and repeatedly takes a configuration off
the frontier, asks the graph for its neighbours, and for every neighbour not
yet in the reachable set inserts it, records ``(parent, action)`` and pushes
it.  Neither breadth- nor depth-first order is required for correctness;
``ExplorationConfig.strategy`` selects one.

Duplicate successors produced by different actions of the same
configuration are resolved by "first successful insertion wins": the action
enumerated first by ``enabled`` becomes the recorded parent edge.

Every run owns its reachable set and parent map.  Nothing is shared between
runs, so two runs over the same graph are independent.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Set as AbstractSet
from dataclasses import dataclass
from typing import (
    Any,
    Deque,
    Dict,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
)

from .config import ExplorationConfig
from .configuration import KeyFunction, identity_key
from .errors import BudgetExceededError, TargetNotReachableError
from .rooted_graph import RootedGraph, as_rooted_graph, labelled_edges

logger = logging.getLogger(__name__)

C = TypeVar("C")          # configuration type

# ---------------------------------------------------------------------------
# Reachable set
# ---------------------------------------------------------------------------

class ReachableSet(AbstractSet, Generic[C]):
    """Insertion-ordered set of configurations, keyed by identity key.

    Iteration yields configurations in discovery order.  Membership uses the
    same key function as the run that produced the set, so configurations
    that are not themselves hashable can still be stored when a key
    function is supplied.
    """

    def __init__(self, key: Optional[KeyFunction] = None) -> None:
        self._key = key
        self._items: Dict[Hashable, C] = {}

    @classmethod
    def _from_iterable(cls, it: Iterable[Any]) -> frozenset:
        return frozenset(it)

    def key_of(self, configuration: C) -> Hashable:
        return identity_key(configuration, self._key)

    def add(self, configuration: C) -> bool:
        """Insert *configuration*; return ``True`` if it was new."""
        k = self.key_of(configuration)
        if k in self._items:
            return False
        self._items[k] = configuration
        return True

    def get(self, configuration: C) -> Optional[C]:
        """Return the stored configuration equal to *configuration*."""
        return self._items.get(self.key_of(configuration))

    def __contains__(self, configuration: object) -> bool:
        return self.key_of(configuration) in self._items

    def __iter__(self) -> Iterator[C]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ReachableSet({len(self._items)} configurations)"


# ---------------------------------------------------------------------------
# Parent tracer
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParentRecord(Generic[C]):
    """The edge that first discovered a configuration."""
    parent: C
    action: Any


@dataclass(frozen=True)
class TraceStep(Generic[C]):
    """One step of a trace; ``action`` is ``None`` for the root."""
    configuration: C
    action: Any = None

    def __str__(self) -> str:
        act = f" --[{self.action}]--> " if self.action is not None else "[init] "
        return f"{act}{self.configuration!r}"


class ParentTracer(Generic[C]):
    """Records one parent edge per discovered configuration and replays them.

    Roots are registered with :meth:`add_root` and have no parent.  Each
    other configuration gets exactly one :class:`ParentRecord`, the first
    one offered; later rediscoveries are ignored.  A parent must be known
    before it can be recorded, so the records can never form a cycle.
    """

    def __init__(self, key: Optional[KeyFunction] = None) -> None:
        self._key = key
        self._roots: Dict[Hashable, C] = {}
        self._parents: Dict[Hashable, ParentRecord[C]] = {}

    def _k(self, configuration: Any) -> Hashable:
        return identity_key(configuration, self._key)

    # -- Mutation --------------------------------------------------------

    def add_root(self, configuration: C) -> bool:
        k = self._k(configuration)
        if k in self._roots or k in self._parents:
            return False
        self._roots[k] = configuration
        return True

    def record(self, child: C, parent: C, action: Any = None) -> bool:
        """Record that *parent* discovered *child* via *action*.

        Returns ``False`` (and changes nothing) when *child* is a root or
        already has a parent.  Raises :class:`TargetNotReachableError` if
        *parent* itself is unknown.
        """
        ck = self._k(child)
        if ck in self._roots or ck in self._parents:
            return False
        pk = self._k(parent)
        if pk not in self._roots and pk not in self._parents:
            raise TargetNotReachableError(parent)
        self._parents[ck] = ParentRecord(parent, action)
        return True

    # -- Query -----------------------------------------------------------

    def __contains__(self, configuration: object) -> bool:
        k = self._k(configuration)
        return k in self._roots or k in self._parents

    def __len__(self) -> int:
        return len(self._roots) + len(self._parents)

    def is_root(self, configuration: C) -> bool:
        return self._k(configuration) in self._roots

    def parent_of(self, configuration: C) -> Optional[ParentRecord[C]]:
        """Parent record of *configuration*; ``None`` for roots."""
        k = self._k(configuration)
        if k in self._parents:
            return self._parents[k]
        if k in self._roots:
            return None
        raise TargetNotReachableError(configuration)

    @property
    def roots(self) -> Tuple[C, ...]:
        return tuple(self._roots.values())

    def traceback_steps(self, target: C) -> Tuple[TraceStep[C], ...]:
        """Root-to-*target* steps, each with the action that led to it."""
        k = self._k(target)
        if k not in self._roots and k not in self._parents:
            raise TargetNotReachableError(target)

        steps: List[TraceStep[C]] = []
        current = target
        while k in self._parents:
            rec = self._parents[k]
            steps.append(TraceStep(current, rec.action))
            current = rec.parent
            k = self._k(current)
        steps.append(TraceStep(self._roots.get(k, current), None))
        steps.reverse()
        return tuple(steps)

    def traceback(self, target: C) -> Tuple[C, ...]:
        """Configurations from a root to *target*, in order."""
        return tuple(step.configuration for step in self.traceback_steps(target))

    def depth(self, target: C) -> int:
        return len(self.traceback_steps(target)) - 1

    def __repr__(self) -> str:
        return f"ParentTracer(roots={len(self._roots)}, records={len(self._parents)})"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass
class ReachabilityResult(Generic[C]):
    """Outcome of :meth:`Reachability.run`.

    Unpacks as ``reachable, tracer = result``.
    """
    reachable: ReachableSet[C]
    tracer: ParentTracer[C]
    complete: bool
    transitions_explored: int = 0
    max_depth: int = 0
    elapsed: float = 0.0
    budget_exceeded: bool = False
    budget_reason: Optional[str] = None

    def __iter__(self) -> Iterator[Any]:
        yield self.reachable
        yield self.tracer

    @property
    def size(self) -> int:
        return len(self.reachable)

    def summary(self) -> str:
        if self.complete:
            status = "complete"
        elif self.budget_exceeded:
            status = f"budget exceeded ({self.budget_reason})"
        else:
            status = "stopped early"
        lines = [
            f"Status: {status}",
            f"Configurations: {self.size}",
            f"Transitions explored: {self.transitions_explored}",
            f"Max depth reached: {self.max_depth}",
            f"Elapsed: {self.elapsed:.3f}s",
        ]
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# ExplorationRun — one incremental search
# ---------------------------------------------------------------------------

class ExplorationRun(Generic[C]):
    """A single exploration of a rooted graph.

    Iterating the run yields each configuration right after it has been
    inserted into the reachable set (roots first).  Stopping the iteration
    stops the search: no further frontier element is processed.

    The run can only be iterated once.
    """

    def __init__(
        self,
        graph: RootedGraph[C],
        config: ExplorationConfig,
        key: Optional[KeyFunction] = None,
    ) -> None:
        self.graph = graph
        self.config = config
        self.reachable: ReachableSet[C] = ReachableSet(key)
        self.tracer: ParentTracer[C] = ParentTracer(key)
        self.transitions_explored = 0
        self.max_depth = 0
        self.budget_exceeded = False
        self.budget_reason: Optional[str] = None
        self._frontier: Deque[Tuple[C, int]] = deque()
        self._finished = False
        self._started: Optional[float] = None
        self._stopped: Optional[float] = None
        self._iterator: Optional[Iterator[C]] = None

    # -- Iteration -------------------------------------------------------

    def __iter__(self) -> Iterator[C]:
        if self._iterator is None:
            self._iterator = self._discover()
        return self._iterator

    def exhaust(self) -> "ExplorationRun[C]":
        """Consume the remaining exploration."""
        for _ in self:
            pass
        return self

    def stop(self) -> None:
        """Abandon the search; the result is marked incomplete."""
        if self._iterator is not None:
            self._iterator.close()  # type: ignore[attr-defined]
        if self._stopped is None:
            self._stopped = time.monotonic()

    @property
    def complete(self) -> bool:
        return self._finished and not self.budget_exceeded

    @property
    def elapsed(self) -> float:
        if self._started is None:
            return 0.0
        end = self._stopped if self._stopped is not None else time.monotonic()
        return end - self._started

    def result(self) -> ReachabilityResult[C]:
        return ReachabilityResult(
            reachable=self.reachable,
            tracer=self.tracer,
            complete=self.complete,
            transitions_explored=self.transitions_explored,
            max_depth=self.max_depth,
            elapsed=self.elapsed,
            budget_exceeded=self.budget_exceeded,
            budget_reason=self.budget_reason,
        )

    # -- Search ----------------------------------------------------------

    def _out_of_time(self) -> Optional[str]:
        limit = self.config.max_seconds
        if limit is not None and self.elapsed > limit:
            return f"more than {limit}s"
        return None

    def _out_of_budget(self) -> Optional[str]:
        limit = self.config.max_configurations
        if limit is not None and len(self.reachable) >= limit:
            return f"more than {limit} configurations"
        return self._out_of_time()

    def _exceed(self, reason: str) -> None:
        self.budget_exceeded = True
        self.budget_reason = reason
        self._stopped = time.monotonic()
        logger.warning(
            "Exploration budget exceeded after %d configurations: %s",
            len(self.reachable), reason,
        )
        if self.config.raise_on_budget:
            raise BudgetExceededError(reason, partial=self.result())

    def _insert(self, configuration: C, depth: int) -> None:
        self.reachable.add(configuration)
        self._frontier.append((configuration, depth))
        if depth > self.max_depth:
            self.max_depth = depth
        n = len(self.reachable)
        if n % self.config.log_every == 0:
            logger.info(
                "%d configurations discovered, frontier %d, depth %d",
                n, len(self._frontier), self.max_depth,
            )

    def _discover(self) -> Iterator[C]:
        self._started = time.monotonic()
        logger.debug("Exploration of %r started (strategy=%s)",
                     self.graph, self.config.strategy)
        pop = self._frontier.popleft if self.config.strategy == "bfs" else self._frontier.pop

        for root in self.graph.roots():
            if root in self.reachable:
                continue
            reason = self._out_of_budget()
            if reason is not None:
                self._exceed(reason)
                return
            self.tracer.add_root(root)
            self._insert(root, 0)
            yield root

        while self._frontier:
            reason = self._out_of_time()
            if reason is not None:
                self._exceed(reason)
                return
            current, depth = pop()
            for action, succ in labelled_edges(self.graph, current):
                self.transitions_explored += 1
                if succ in self.reachable:
                    continue
                reason = self._out_of_budget()
                if reason is not None:
                    self._exceed(reason)
                    return
                self.tracer.record(succ, current, action)
                self._insert(succ, depth + 1)
                yield succ

        self._finished = True
        self._stopped = time.monotonic()
        logger.debug(
            "Exploration finished: %d configurations, %d transitions in %.3fs",
            len(self.reachable), self.transitions_explored, self.elapsed,
        )


# ---------------------------------------------------------------------------
# Reachability — the engine
# ---------------------------------------------------------------------------

class Reachability(Generic[C]):
    """
    Computes the set of configurations reachable from the roots of a rooted
    graph, together with a parent map for trace reconstruction.

    Usage
    -----
    >>> from str_checker.rooted_graph import ExplicitRootedGraph
    >>> g = ExplicitRootedGraph([0], {0: [1, 2], 1: [2], 2: [0]})
    >>> reachable, tracer = Reachability().run(g)
    >>> sorted(reachable)
    [0, 1, 2]
    >>> tracer.traceback(2)
    (0, 2)

    Parameters
    ----------
    config :
        Budget and frontier strategy; defaults to an unbounded BFS.
    key :
        Optional identity-key function for configurations.
    """

    def __init__(
        self,
        config: Optional[ExplorationConfig] = None,
        *,
        key: Optional[KeyFunction] = None,
    ) -> None:
        self.config = (config or ExplorationConfig()).check()
        self.key = key

    def start(self, graph: Any) -> ExplorationRun[C]:
        """Prepare a run over *graph* (a rooted graph or an STR)."""
        return ExplorationRun(as_rooted_graph(graph), self.config, self.key)

    def explore(self, graph: Any) -> Iterator[C]:
        """Yield newly discovered configurations, roots first."""
        return iter(self.start(graph))

    def run(self, graph: Any) -> ReachabilityResult[C]:
        """Explore *graph* until the frontier is empty or the budget runs out."""
        return self.start(graph).exhaust().result()


def reachable(graph: Any, config: Optional[ExplorationConfig] = None,
              key: Optional[KeyFunction] = None) -> ReachabilityResult:
    """Shorthand for ``Reachability(config, key=key).run(graph)``."""
    return Reachability(config, key=key).run(graph)


__all__ = [
    "ReachableSet",
    "ParentRecord",
    "TraceStep",
    "ParentTracer",
    "ReachabilityResult",
    "ExplorationRun",
    "Reachability",
    "reachable",
]

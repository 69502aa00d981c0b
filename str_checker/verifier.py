# str_checker/verifier.py
"""
Invariant and deadlock checking with counterexample traces.

:class:`PredicateVerifier` drives a :class:`~str_checker.exploration.Reachability`
run and evaluates a predicate on every newly discovered configuration.  The
first configuration where the predicate is false stops the search, and its
trace is rebuilt from the run's parent records.

Violations and deadlocks are detections, not errors: they come back as a
:class:`VerificationResult` carrying a :class:`Counterexample`.  Only a
predicate that raises (:class:`~str_checker.errors.PredicateError`) or an
exhausted budget with ``raise_on_budget`` set leaves as an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import (
    Any,
    Callable,
    Generic,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
)

from .config import ExplorationConfig
from .configuration import KeyFunction, fingerprint
from .errors import PredicateError
from .exploration import ExplorationRun, Reachability, TraceStep
from .relation import SemanticTransitionRelation
from .rooted_graph import STR2RG

logger = logging.getLogger(__name__)

C = TypeVar("C")

Predicate = Callable[[Any], bool]


class VerificationStatus(Enum):
    """Outcome of a verification run."""
    HOLDS = auto()            # predicate true at every reachable configuration
    VIOLATED = auto()         # some reachable configuration falsifies it
    DEADLOCK = auto()         # some reachable configuration has no enabled action
    BUDGET_EXCEEDED = auto()  # exploration budget exhausted, inconclusive


@dataclass(frozen=True)
class Counterexample(Generic[C]):
    """A root-to-target witness for a violation or a deadlock."""
    kind: str                         # "invariant" or "deadlock"
    property_name: str
    configuration: C
    steps: Tuple[TraceStep[C], ...]

    @property
    def trace(self) -> Tuple[C, ...]:
        return tuple(step.configuration for step in self.steps)

    @property
    def depth(self) -> int:
        return len(self.steps) - 1

    def pretty(self) -> str:
        lines = [
            f"=== Counterexample for {self.kind} '{self.property_name}' ===",
            f"Depth: {self.depth}",
            f"Target: {self.configuration!r}",
            "Trace:",
        ]
        for i, step in enumerate(self.steps):
            lines.append(f"  [{i}] {step}")
        return "\n".join(lines)


@dataclass(frozen=True)
class VerificationResult(Generic[C]):
    """Result of :meth:`PredicateVerifier.check` / ``check_deadlock_free``."""
    status: VerificationStatus
    property_name: str
    configurations_explored: int
    transitions_explored: int = 0
    counterexample: Optional[Counterexample[C]] = None
    elapsed: float = 0.0
    budget_reason: Optional[str] = None

    @property
    def holds(self) -> bool:
        return self.status is VerificationStatus.HOLDS

    @property
    def is_conclusive(self) -> bool:
        return self.status is not VerificationStatus.BUDGET_EXCEEDED

    @property
    def violation(self) -> Optional[C]:
        return self.counterexample.configuration if self.counterexample else None

    @property
    def trace(self) -> Tuple[C, ...]:
        return self.counterexample.trace if self.counterexample else ()

    def summary(self) -> str:
        n = self.configurations_explored
        if self.status is VerificationStatus.HOLDS:
            return f"'{self.property_name}' holds for all {n} reachable configurations"
        if self.status is VerificationStatus.BUDGET_EXCEEDED:
            return (
                f"'{self.property_name}' undecided: budget exceeded "
                f"({self.budget_reason}) after {n} configurations"
            )
        assert self.counterexample is not None
        what = "violated" if self.status is VerificationStatus.VIOLATED else "deadlock"
        return (
            f"'{self.property_name}' {what} at {self.counterexample.configuration!r} "
            f"(depth {self.counterexample.depth}, {n} configurations explored)"
        )


# ---------------------------------------------------------------------------
# PredicateVerifier
# ---------------------------------------------------------------------------

class PredicateVerifier:
    """
    High-level API for invariant and deadlock checks.

    Usage::

        verifier = PredicateVerifier(ExplorationConfig(max_configurations=50_000))
        result = verifier.check(relation, lambda s: not (s.a == "C" and s.b == "C"))
        if not result.holds:
            print(result.counterexample.pretty())

        deadlocks = verifier.check_deadlock_free(relation)
    """

    def __init__(
        self,
        config: Optional[ExplorationConfig] = None,
        *,
        key: Optional[KeyFunction] = None,
    ) -> None:
        self._engine: Reachability = Reachability(config, key=key)

    @property
    def config(self) -> ExplorationConfig:
        return self._engine.config

    # -- Invariants ------------------------------------------------------

    def check(
        self,
        graph: Any,
        predicate: Predicate,
        name: Optional[str] = None,
    ) -> VerificationResult:
        """Check that *predicate* holds at every configuration reachable in *graph*.

        *graph* is a rooted graph or an STR (wrapped in ``STR2RG``).
        """
        if name is None:
            name = getattr(predicate, "__name__", "predicate")
        return self.check_all(graph, {name: predicate})

    def check_all(
        self,
        graph: Any,
        predicates: Mapping[str, Predicate],
    ) -> VerificationResult:
        """Check several named invariants during a single exploration."""
        label = ", ".join(predicates) or "true"
        run: ExplorationRun = self._engine.start(graph)
        for configuration in run:
            for name, predicate in predicates.items():
                if _evaluate(name, predicate, configuration, run):
                    continue
                run.stop()
                logger.info("Invariant '%s' violated at %s: %r",
                            name, fingerprint(configuration), configuration)
                return VerificationResult(
                    status=VerificationStatus.VIOLATED,
                    property_name=name,
                    configurations_explored=len(run.reachable),
                    transitions_explored=run.transitions_explored,
                    counterexample=Counterexample(
                        kind="invariant",
                        property_name=name,
                        configuration=configuration,
                        steps=run.tracer.traceback_steps(configuration),
                    ),
                    elapsed=run.elapsed,
                )

        return _final_result(run, label)

    # -- Deadlocks -------------------------------------------------------

    def check_deadlock_free(
        self,
        relation: SemanticTransitionRelation,
    ) -> VerificationResult:
        """Report a reachable configuration with no enabled action, if any.

        Exploration runs to completion (or to the budget) first; then every
        discovered configuration is inspected in discovery order.
        """
        if isinstance(relation, STR2RG):
            relation = relation.relation
        if not isinstance(relation, SemanticTransitionRelation):
            raise TypeError(
                f"Deadlock checking needs a SemanticTransitionRelation, got {relation!r}"
            )
        name = "deadlock-freedom"
        run: ExplorationRun = self._engine.start(STR2RG(relation)).exhaust()

        for configuration in run.reachable:
            if relation.has_enabled(configuration):
                continue
            logger.info("Deadlock at %s: %r", fingerprint(configuration), configuration)
            return VerificationResult(
                status=VerificationStatus.DEADLOCK,
                property_name=name,
                configurations_explored=len(run.reachable),
                transitions_explored=run.transitions_explored,
                counterexample=Counterexample(
                    kind="deadlock",
                    property_name=name,
                    configuration=configuration,
                    steps=run.tracer.traceback_steps(configuration),
                ),
                elapsed=run.elapsed,
            )

        return _final_result(run, name)


def _evaluate(name: str, predicate: Predicate, configuration: Any,
              run: ExplorationRun) -> bool:
    try:
        return bool(predicate(configuration))
    except Exception as exc:
        run.stop()
        raise PredicateError(name, configuration, exc) from exc


def _final_result(run: ExplorationRun, name: str) -> VerificationResult:
    if run.budget_exceeded:
        return VerificationResult(
            status=VerificationStatus.BUDGET_EXCEEDED,
            property_name=name,
            configurations_explored=len(run.reachable),
            transitions_explored=run.transitions_explored,
            elapsed=run.elapsed,
            budget_reason=run.budget_reason,
        )
    logger.debug("'%s' holds for all %d reachable configurations",
                 name, len(run.reachable))
    return VerificationResult(
        status=VerificationStatus.HOLDS,
        property_name=name,
        configurations_explored=len(run.reachable),
        transitions_explored=run.transitions_explored,
        elapsed=run.elapsed,
    )


# ---------------------------------------------------------------------------
# Module-level shortcuts
# ---------------------------------------------------------------------------

def check(graph: Any, predicate: Predicate, *,
          name: Optional[str] = None,
          config: Optional[ExplorationConfig] = None,
          key: Optional[KeyFunction] = None) -> VerificationResult:
    return PredicateVerifier(config, key=key).check(graph, predicate, name)


def check_deadlock_free(relation: SemanticTransitionRelation, *,
                        config: Optional[ExplorationConfig] = None,
                        key: Optional[KeyFunction] = None) -> VerificationResult:
    return PredicateVerifier(config, key=key).check_deadlock_free(relation)


__all__ = [
    "Predicate",
    "VerificationStatus",
    "Counterexample",
    "VerificationResult",
    "PredicateVerifier",
    "check",
    "check_deadlock_free",
]

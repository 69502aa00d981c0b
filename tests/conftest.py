# tests/conftest.py
"""
Shared models and fixtures for the str_checker tests.

The models here are small user-supplied STRs of the kind the engine is
meant to check: two mutual-exclusion sketches, a non-deterministic integer
counter, a two-configuration deadlock, an unbounded counter and a countdown
whose ``enabled`` is a generator.
"""

import logging

import pytest

from str_checker import (
    ExplicitRootedGraph,
    FunctionalRelation,
    Piece,
    PiecewiseRelation,
    SemanticTransitionRelation,
    State,
)


# ── Alice/Bob mutual exclusion ──────────────────────────────────────

def _move(proc, src, dst, guard=None):
    """Piece moving process *proc* from *src* to *dst*."""
    def enabled(s):
        if s[proc] != src:
            return False
        return guard(s) if guard is not None else True

    def effect(s):
        return s.with_(**{proc: dst})

    return Piece(enabled, effect, f"{proc}:{src}->{dst}")


def make_simple_alice_bob():
    """a, b in {I, C}; each process toggles I -> C -> I independently."""
    return PiecewiseRelation(
        roots=[State(a="I", b="I")],
        pieces=[
            _move("a", "I", "C"),
            _move("a", "C", "I"),
            _move("b", "I", "C"),
            _move("b", "C", "I"),
        ],
    )


def make_waiting_alice_bob():
    """a, b in {I, W, C}; a process enters C from W only if the other is not in C."""
    return PiecewiseRelation(
        roots=[State(a="I", b="I")],
        pieces=[
            _move("a", "I", "W"),
            _move("a", "W", "C", guard=lambda s: s.b != "C"),
            _move("a", "C", "I"),
            _move("b", "I", "W"),
            _move("b", "W", "C", guard=lambda s: s.a != "C"),
            _move("b", "C", "I"),
        ],
    )


def mutual_exclusion(s):
    return not (s.a == "C" and s.b == "C")


# ── Integer models ──────────────────────────────────────────────────

def make_shrinking_counter(start=3):
    """x > 0 branches to -x or x - 1; x < 0 climbs back; 0 is stuck."""
    return PiecewiseRelation(
        roots=[start],
        pieces=[
            Piece(lambda x: x > 0, lambda x: {-x, x - 1}, "shrink"),
            Piece(lambda x: x < 0, lambda x: x + 1, "climb"),
        ],
    )


def make_nested_counter(start=12):
    """Nested pieces: positive values halve when even, decrement when odd."""
    return PiecewiseRelation(
        roots=[start],
        pieces=[
            Piece(lambda x: x > 0, [
                Piece(lambda x: x % 2 == 0, lambda x: x // 2, "even"),
                Piece(lambda x: x % 2 == 1, lambda x: x - 1, "odd"),
            ], "positive"),
        ],
    )


def make_two_step_deadlock():
    """roots {0}; enabled(0) = {a}; execute(a, 0) = {1}; enabled(1) = {}."""
    return FunctionalRelation(
        roots=[0],
        enabled_fn=lambda c: ["a"] if c == 0 else [],
        execute_fn=lambda a, c: {1},
    )


def make_unbounded_counter():
    return PiecewiseRelation(
        roots=[0],
        pieces=[Piece(lambda x: True, lambda x: x + 1, "inc")],
    )


class LazyCountdown(SemanticTransitionRelation):
    """Counts down to 0; ``enabled`` is a generator, so it has no len()."""

    def __init__(self, start=2):
        self.start = start

    def roots(self):
        return [self.start]

    def enabled(self, c):
        if c > 0:
            yield lambda x: x - 1


# ── Fixtures ────────────────────────────────────────────────────────

@pytest.fixture
def simple_alice_bob():
    return make_simple_alice_bob()


@pytest.fixture
def waiting_alice_bob():
    return make_waiting_alice_bob()


@pytest.fixture
def shrinking_counter():
    return make_shrinking_counter()


@pytest.fixture
def nested_counter():
    return make_nested_counter()


@pytest.fixture
def two_step_deadlock():
    return make_two_step_deadlock()


@pytest.fixture
def unbounded_counter():
    return make_unbounded_counter()


@pytest.fixture
def lazy_countdown():
    return LazyCountdown()


@pytest.fixture
def diamond_graph():
    """0 -> {1, 2} -> 3, plus an unreachable 4 -> 0."""
    return ExplicitRootedGraph([0], {0: [1, 2], 1: [3], 2: [3], 4: [0]})


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """Undo configure_logging() calls so handlers never outlive a test's capture."""
    logger = logging.getLogger("str_checker")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)

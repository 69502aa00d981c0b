"""
alice_bob.py

Mutual exclusion between two processes, Alice (a) and Bob (b).

Two variants are checked against the invariant "not both critical":

  simple   a, b in {I, C}; each process toggles I -> C -> I on its own.
           Both can be critical at once, so the check yields a trace.
  waiting  a, b in {I, W, C}; a process announces itself (W) and only
           enters C when the other is not critical.  Mutual exclusion
           holds and the system is deadlock-free.

Run:  python examples/alice_bob.py [-v]
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable, List, Optional

from str_checker import (
    Piece,
    PiecewiseRelation,
    PredicateVerifier,
    State,
    configure_logging,
)


def move(proc: str, src: str, dst: str,
         guard: Optional[Callable[[State], bool]] = None) -> Piece:
    def enabled(s: State) -> bool:
        return s[proc] == src and (guard is None or guard(s))

    return Piece(enabled, lambda s: s.with_(**{proc: dst}), f"{proc}:{src}->{dst}")


def simple() -> PiecewiseRelation:
    return PiecewiseRelation(
        roots=[State(a="I", b="I")],
        pieces=[
            move("a", "I", "C"), move("a", "C", "I"),
            move("b", "I", "C"), move("b", "C", "I"),
        ],
    )


def waiting() -> PiecewiseRelation:
    return PiecewiseRelation(
        roots=[State(a="I", b="I")],
        pieces=[
            move("a", "I", "W"),
            move("a", "W", "C", guard=lambda s: s.b != "C"),
            move("a", "C", "I"),
            move("b", "I", "W"),
            move("b", "W", "C", guard=lambda s: s.a != "C"),
            move("b", "C", "I"),
        ],
    )


def mutual_exclusion(s: State) -> bool:
    return not (s.a == "C" and s.b == "C")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("-v", "--verbose", action="count", default=0)
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    verifier = PredicateVerifier()
    failures = 0
    for name, build in (("simple", simple), ("waiting", waiting)):
        relation = build()
        result = verifier.check(relation, mutual_exclusion)
        print(f"[{name}] {result.summary()}")
        if result.counterexample is not None:
            print(result.counterexample.pretty())
            failures += 1
        print(f"[{name}] {verifier.check_deadlock_free(relation).summary()}")
    return failures


if __name__ == "__main__":
    sys.exit(main())

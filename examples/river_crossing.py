"""
river_crossing.py

The farmer / wolf / goat / cabbage puzzle as a reachability question.

A configuration is the frozenset of items on the far bank.  The farmer
crosses alone or with one item from the farmer's bank; the goat may not be
left with the wolf or the cabbage without the farmer.  A crossing that
would leave an unsafe bank is still enabled but has no successor.  Solving
the puzzle means finding a trace to the configuration where everything is
across, which we obtain as the counterexample of "not everything is
across".

Run:  python examples/river_crossing.py [-v]
"""

from __future__ import annotations

import argparse
import sys
from typing import FrozenSet, List, Optional

from str_checker import (
    Piece,
    PiecewiseRelation,
    PredicateVerifier,
    configure_logging,
)

ITEMS = ("wolf", "goat", "cabbage")
EVERYONE = frozenset(("farmer",) + ITEMS)

Bank = FrozenSet[str]


def safe(far: Bank) -> bool:
    for bank in (far, EVERYONE - far):
        if "farmer" in bank:
            continue
        if "goat" in bank and ({"wolf", "cabbage"} & bank):
            return False
    return True


def crossing(item: Optional[str]) -> Piece:
    """The farmer crosses, optionally carrying *item*."""
    def enabled(far: Bank) -> bool:
        if item is None:
            return True
        return (item in far) == ("farmer" in far)

    def effect(far: Bank):
        moving = {"farmer"} if item is None else {"farmer", item}
        after = far - moving if "farmer" in far else far | moving
        return after if safe(after) else None

    return Piece(enabled, effect, f"cross with {item}" if item else "cross alone")


def puzzle() -> PiecewiseRelation:
    return PiecewiseRelation(
        roots=[frozenset()],
        pieces=[crossing(None)] + [crossing(item) for item in ITEMS],
    )


def main(argv: Optional[List[str]] = None) -> Optional[tuple]:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("-v", "--verbose", action="count", default=0)
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    result = PredicateVerifier().check(puzzle(), lambda far: far != EVERYONE, "unsolved")
    if result.counterexample is None:
        print("No solution: " + result.summary())
        return None
    print(f"Solved in {result.counterexample.depth} crossings:")
    for step in result.counterexample.steps[1:]:
        print(f"  {step.action}: far bank = {sorted(step.configuration)}")
    return result.trace


if __name__ == "__main__":
    sys.exit(0 if main() is not None else 1)

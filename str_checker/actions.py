# str_checker/actions.py
"""
Action model and nested piecewise definitions.

An :class:`Action` is one enabled piece of a piecewise transition relation,
bound to the configuration it was enabled in.  It is an opaque, invokable
unit: calling it yields the successor configurations of that piece.

Piecewise relations are written as trees of :class:`Piece` objects::

    Piece(guard, effect)                 # leaf: guard then effect
    Piece(guard, [Piece(...), ...])      # nested: guard then more pieces

:func:`resolve_pieces` walks such a tree outer-to-inner, left-to-right and
returns the flat list of leaf actions whose whole guard chain holds.
Guards may overlap; every satisfied leaf becomes its own action.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    FrozenSet,
    Generic,
    Iterator,
    List,
    Optional,
    Sequence,
    TypeVar,
    Union,
)

C = TypeVar("C")

Guard = Callable[[Any], bool]
Effect = Callable[[Any], Any]

# Effect results that are read as *collections* of successors.  Anything
# else is a single successor configuration, including tuples and
# frozensets, which are common hashable configuration types; ``None``
# means "no successor".
_COLLECTION_TYPES = (set, list)


def normalize_successors(result: Any) -> FrozenSet[Any]:
    """Turn an effect's return value into a successor set."""
    if result is None:
        return frozenset()
    if isinstance(result, _COLLECTION_TYPES):
        return frozenset(result)
    if isinstance(result, Iterator):
        return frozenset(result)
    return frozenset((result,))


# ---------------------------------------------------------------------------
# Action
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Action(Generic[C]):
    """One leaf-level piece of the relation, enabled in ``source``.

    Equality is by ``(name, source)``; it exists for diagnostics and is
    never used to deduplicate successors.
    """

    name: str
    effect: Effect = field(compare=False, repr=False)
    source: Any = field(default=None)

    def execute(self, configuration: Any = None) -> FrozenSet[Any]:
        """Run the effect against *configuration* (default: ``source``)."""
        target = self.source if configuration is None else configuration
        return normalize_successors(self.effect(target))

    def __call__(self) -> FrozenSet[Any]:
        return self.execute()

    def __str__(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Nested piecewise definitions
# ---------------------------------------------------------------------------

def always(configuration: Any) -> bool:
    """Guard that always holds ("otherwise" branch)."""
    return True


@dataclass(frozen=True)
class Piece:
    """A guarded piece: ``body`` is an effect or a sequence of nested pieces."""

    guard: Guard
    body: Union[Effect, Sequence["Piece"]]
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if not callable(self.guard):
            raise TypeError(f"Piece guard must be callable, got {self.guard!r}")
        if not self.is_leaf:
            body = tuple(self.body)  # type: ignore[arg-type]
            for sub in body:
                if not isinstance(sub, Piece):
                    raise TypeError(
                        f"Nested piece body must contain Piece objects, got {sub!r}"
                    )
            object.__setattr__(self, "body", body)

    @property
    def is_leaf(self) -> bool:
        return callable(self.body)

    def leaves(self) -> Iterator["Piece"]:
        """Yield every leaf below this piece (guards ignored)."""
        if self.is_leaf:
            yield self
            return
        for sub in self.body:  # type: ignore[union-attr]
            yield from sub.leaves()


def resolve_pieces(
    pieces: Sequence[Piece],
    configuration: Any,
    prefix: str = "",
) -> List[Action]:
    """Flatten *pieces* into the actions enabled in *configuration*.

    Guards are evaluated outer-to-inner and left-to-right; a nested body is
    only inspected when its own guard holds.  Unnamed pieces are named by
    position (``piece0``, ``piece1``, ...), and nested names are joined with
    ``/``.
    """
    enabled: List[Action] = []
    for index, piece in enumerate(pieces):
        if not piece.guard(configuration):
            continue
        local = piece.name if piece.name is not None else f"piece{index}"
        name = f"{prefix}/{local}" if prefix else local
        if piece.is_leaf:
            enabled.append(Action(name, piece.body, configuration))  # type: ignore[arg-type]
        else:
            enabled.extend(
                resolve_pieces(piece.body, configuration, name)  # type: ignore[arg-type]
            )
    return enabled


def piecewise(*pieces: Union[Piece, tuple]) -> List[Piece]:
    """Build a piece list from ``Piece`` objects or ``(guard, body[, name])`` tuples.

    Nested bodies given as lists of tuples are converted recursively.
    """
    out: List[Piece] = []
    for p in pieces:
        if isinstance(p, Piece):
            out.append(p)
            continue
        guard, body, *rest = p
        name = rest[0] if rest else None
        if not callable(body):
            body = piecewise(*body)
        out.append(Piece(guard, body, name))
    return out


__all__ = [
    "Guard",
    "Effect",
    "Action",
    "Piece",
    "always",
    "piecewise",
    "resolve_pieces",
    "normalize_successors",
]

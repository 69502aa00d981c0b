# str_checker/relation.py
"""
Semantic Transition Relations (STR).

An STR describes a transition system *intensionally*:

  - ``roots()``          the finite set of initial configurations
  - ``enabled(c)``       the leaf-level actions whose guards hold in ``c``
  - ``execute(a, c)``    the successor configurations of action ``a`` in ``c``

``execute`` must be deterministic in ``(a, c)`` (the same pair always gives
the same successor set), and may only be called with an action that
``enabled(c)`` returned for that same ``c``.  Guards may overlap and one
action may produce zero, one or many successors.

Concrete relations
------------------
PiecewiseRelation
    Built from a (possibly nested) list of :class:`~str_checker.actions.Piece`.
FunctionalRelation
    Wraps two plain callables ``enabled_fn(c)`` / ``execute_fn(a, c)``.
"""

from __future__ import annotations

import abc
import logging
from typing import (
    Any,
    Callable,
    FrozenSet,
    Generic,
    Iterable,
    List,
    Sequence,
    Tuple,
    TypeVar,
)

from .actions import Action, Piece, normalize_successors, resolve_pieces
from .errors import ContractViolationError

logger = logging.getLogger(__name__)

_NONE_ENABLED = object()    # sentinel for an empty ``enabled`` result

C = TypeVar("C")          # configuration type
A = TypeVar("A")          # action type


class SemanticTransitionRelation(abc.ABC, Generic[C, A]):
    """Abstract STR.  Subclasses provide ``roots``, ``enabled`` and may
    override ``execute``.

    The default :meth:`execute` understands :class:`Action` objects: it
    checks the action was enabled in the given configuration and runs its
    effect.
    """

    @abc.abstractmethod
    def roots(self) -> Iterable[C]:
        """Return the (finite) initial configurations."""

    @abc.abstractmethod
    def enabled(self, configuration: C) -> Sequence[A]:
        """Return every leaf action whose guard holds in *configuration*."""

    def execute(self, action: A, configuration: C) -> FrozenSet[C]:
        """Return the successor configurations of *action* in *configuration*."""
        if isinstance(action, Action):
            if action.source is not None and action.source != configuration:
                raise ContractViolationError(action, configuration)
            return action.execute(configuration)
        if callable(action):
            return normalize_successors(action(configuration))
        raise TypeError(
            f"{type(self).__name__}.execute does not know how to run {action!r}; "
            "override execute() for custom action types"
        )

    def successors(self, configuration: C) -> List[Tuple[A, FrozenSet[C]]]:
        """``[(action, execute(action, configuration)) for action in enabled]``."""
        return [
            (action, self.execute(action, configuration))
            for action in self.enabled(configuration)
        ]

    def has_enabled(self, configuration: C) -> bool:
        """True if at least one action is enabled in *configuration*.

        ``enabled`` may return any iterable, generators included, so only
        the first element is ever asked for.
        """
        return next(iter(self.enabled(configuration)), _NONE_ENABLED) is not _NONE_ENABLED

    def is_deadlocked(self, configuration: C) -> bool:
        return not self.has_enabled(configuration)


STR = SemanticTransitionRelation


# ---------------------------------------------------------------------------
# PiecewiseRelation
# ---------------------------------------------------------------------------

class PiecewiseRelation(SemanticTransitionRelation[C, Action]):
    """STR defined by nested guarded pieces.

    >>> from str_checker.actions import Piece
    >>> rel = PiecewiseRelation(
    ...     roots=[3],
    ...     pieces=[
    ...         Piece(lambda x: x > 0, lambda x: {-x, x - 1}, "shrink"),
    ...     ],
    ... )
    >>> [a.name for a in rel.enabled(3)]
    ['shrink']
    >>> sorted(rel.execute(rel.enabled(3)[0], 3))
    [-3, 2]
    """

    def __init__(self, roots: Iterable[C], pieces: Sequence[Piece]) -> None:
        self._roots = tuple(roots)
        self._pieces = tuple(pieces)
        for piece in self._pieces:
            if not isinstance(piece, Piece):
                raise TypeError(f"Expected Piece, got {piece!r}")

    @property
    def pieces(self) -> Tuple[Piece, ...]:
        return self._pieces

    def roots(self) -> Tuple[C, ...]:
        return self._roots

    def enabled(self, configuration: C) -> List[Action]:
        actions = resolve_pieces(self._pieces, configuration)
        logger.debug("%d action(s) enabled in %r", len(actions), configuration)
        return actions

    def __repr__(self) -> str:
        leaves = sum(1 for p in self._pieces for _ in p.leaves())
        return (
            f"PiecewiseRelation(roots={len(self._roots)}, "
            f"pieces={len(self._pieces)}, leaves={leaves})"
        )


# ---------------------------------------------------------------------------
# FunctionalRelation
# ---------------------------------------------------------------------------

class FunctionalRelation(SemanticTransitionRelation[C, A]):
    """STR backed by two plain functions.

    ``enabled_fn(c)`` returns an iterable of actions, ``execute_fn(a, c)``
    returns successors in any form accepted by
    :func:`~str_checker.actions.normalize_successors`.
    """

    def __init__(
        self,
        roots: Iterable[C],
        enabled_fn: Callable[[C], Iterable[A]],
        execute_fn: Callable[[A, C], Any],
    ) -> None:
        self._roots = tuple(roots)
        self._enabled_fn = enabled_fn
        self._execute_fn = execute_fn

    def roots(self) -> Tuple[C, ...]:
        return self._roots

    def enabled(self, configuration: C) -> List[A]:
        return list(self._enabled_fn(configuration))

    def execute(self, action: A, configuration: C) -> FrozenSet[C]:
        return normalize_successors(self._execute_fn(action, configuration))


__all__ = [
    "SemanticTransitionRelation",
    "STR",
    "PiecewiseRelation",
    "FunctionalRelation",
]

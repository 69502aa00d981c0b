# str_checker/rooted_graph.py
"""
Rooted graphs and the STR → rooted graph adapter.

A *rooted graph* (RG) is the flat "roots + neighbours" view consumed by the
exploration engine:

    roots()         -> iterable of configurations
    neighbours(c)   -> set of configurations

:class:`STR2RG` recombines the two responsibilities of an STR (detecting
which transitions are enabled, and constructing target configurations) into
that flat contract.  It additionally offers ``labelled_neighbours(c)``,
which keeps the action that produced each successor so parent records can
name it.
"""

from __future__ import annotations

from typing import (
    Any,
    FrozenSet,
    Generic,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    TypeVar,
    runtime_checkable,
)

from .relation import SemanticTransitionRelation

C = TypeVar("C")


@runtime_checkable
class RootedGraph(Protocol[C]):
    """Anything exposing ``roots()`` and ``neighbours(c)``."""

    def roots(self) -> Iterable[C]:
        ...

    def neighbours(self, configuration: C) -> Iterable[C]:
        ...


@runtime_checkable
class LabelledRootedGraph(RootedGraph[C], Protocol[C]):
    """A rooted graph that can also name the edge leading to each neighbour."""

    def labelled_neighbours(self, configuration: C) -> Iterable[Tuple[Any, C]]:
        ...


def labelled_edges(graph: RootedGraph, configuration: Any) -> Iterator[Tuple[Any, Any]]:
    """Yield ``(action, successor)`` pairs of *graph* at *configuration*.

    Graphs without ``labelled_neighbours`` get ``None`` as the action.
    """
    if isinstance(graph, LabelledRootedGraph):
        yield from graph.labelled_neighbours(configuration)
        return
    for succ in graph.neighbours(configuration):
        yield None, succ


# ---------------------------------------------------------------------------
# STR2RG
# ---------------------------------------------------------------------------

class STR2RG(Generic[C]):
    """Stateless view of an STR as a rooted graph."""

    __slots__ = ("relation",)

    def __init__(self, relation: SemanticTransitionRelation) -> None:
        self.relation = relation

    def roots(self) -> Iterable[C]:
        return self.relation.roots()

    def neighbours(self, configuration: C) -> FrozenSet[C]:
        """Union of ``execute(a, c)`` over every ``a`` in ``enabled(c)``."""
        out = set()
        for action in self.relation.enabled(configuration):
            out.update(self.relation.execute(action, configuration))
        return frozenset(out)

    def labelled_neighbours(self, configuration: C) -> Iterator[Tuple[Any, C]]:
        """Yield ``(action, successor)`` in ``enabled`` order.

        The same successor may appear several times when more than one
        action reaches it.
        """
        for action in self.relation.enabled(configuration):
            for succ in self.relation.execute(action, configuration):
                yield action, succ

    def __repr__(self) -> str:
        return f"STR2RG({self.relation!r})"


def as_rooted_graph(obj: Any) -> RootedGraph:
    """Return *obj* as a rooted graph, wrapping STRs in :class:`STR2RG`."""
    if isinstance(obj, SemanticTransitionRelation):
        return STR2RG(obj)
    if isinstance(obj, RootedGraph):
        return obj
    raise TypeError(
        f"{obj!r} is neither a SemanticTransitionRelation nor a rooted graph "
        "(needs roots() and neighbours())"
    )


# ---------------------------------------------------------------------------
# ExplicitRootedGraph
# ---------------------------------------------------------------------------

class ExplicitRootedGraph(Generic[C]):
    """Rooted graph backed by an adjacency mapping.

    Configurations missing from *edges* have no neighbours.
    """

    def __init__(
        self,
        roots: Iterable[C],
        edges: Optional[Mapping[C, Iterable[C]]] = None,
    ) -> None:
        self._roots = tuple(roots)
        self._edges = {src: frozenset(dsts) for src, dsts in (edges or {}).items()}

    def roots(self) -> Tuple[C, ...]:
        return self._roots

    def neighbours(self, configuration: C) -> FrozenSet[C]:
        return self._edges.get(configuration, frozenset())

    @property
    def num_edges(self) -> int:
        return sum(len(d) for d in self._edges.values())

    def __repr__(self) -> str:
        return (
            f"ExplicitRootedGraph(roots={len(self._roots)}, "
            f"nodes={len(self._edges)}, edges={self.num_edges})"
        )


__all__ = [
    "RootedGraph",
    "LabelledRootedGraph",
    "STR2RG",
    "ExplicitRootedGraph",
    "as_rooted_graph",
    "labelled_edges",
]

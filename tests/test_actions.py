# tests/test_actions.py
"""
Tests for actions, pieces and nested piecewise resolution.
"""

import pytest

from str_checker.actions import (
    Action,
    Piece,
    always,
    normalize_successors,
    piecewise,
    resolve_pieces,
)


class TestNormalizeSuccessors:

    def test_none_is_empty(self):
        assert normalize_successors(None) == frozenset()

    def test_single_value(self):
        assert normalize_successors(5) == frozenset({5})

    def test_tuple_is_single_configuration(self):
        assert normalize_successors((1, 2)) == frozenset({(1, 2)})

    def test_collections(self):
        assert normalize_successors([1, 1, 2]) == frozenset({1, 2})
        assert normalize_successors({3}) == frozenset({3})
        assert normalize_successors(set()) == frozenset()

    def test_frozenset_is_single_configuration(self):
        bank = frozenset({"goat", "farmer"})
        assert normalize_successors(bank) == frozenset({bank})
        assert normalize_successors(frozenset()) == frozenset({frozenset()})
        assert normalize_successors({bank}) == frozenset({bank})

    def test_generator(self):
        assert normalize_successors(x * 2 for x in range(3)) == frozenset({0, 2, 4})


class TestAction:

    def test_call_runs_effect_on_source(self):
        a = Action("inc", lambda x: x + 1, 4)
        assert a() == frozenset({5})
        assert a.execute(4) == frozenset({5})

    def test_equality_ignores_effect(self):
        a1 = Action("inc", lambda x: x + 1, 0)
        a2 = Action("inc", lambda x: x + 2, 0)
        assert a1 == a2
        assert a1 != Action("inc", lambda x: x + 1, 1)
        assert hash(a1) == hash(a2)

    def test_str_is_name(self):
        assert str(Action("go", always, 0)) == "go"


class TestPiece:

    def test_leaf(self):
        p = Piece(always, lambda x: x)
        assert p.is_leaf
        assert list(p.leaves()) == [p]

    def test_nested_body_frozen_to_tuple(self):
        inner = Piece(always, lambda x: x, "inner")
        p = Piece(always, [inner], "outer")
        assert not p.is_leaf
        assert p.body == (inner,)
        assert list(p.leaves()) == [inner]

    def test_rejects_non_callable_guard(self):
        with pytest.raises(TypeError):
            Piece(True, lambda x: x)

    def test_rejects_non_piece_in_body(self):
        with pytest.raises(TypeError):
            Piece(always, [lambda x: x])


class TestResolvePieces:

    def test_overlapping_guards_all_enabled(self):
        pieces = [
            Piece(lambda x: x > 0, lambda x: x - 1, "dec"),
            Piece(lambda x: x > 1, lambda x: x - 2, "dec2"),
        ]
        assert [a.name for a in resolve_pieces(pieces, 5)] == ["dec", "dec2"]
        assert [a.name for a in resolve_pieces(pieces, 1)] == ["dec"]
        assert resolve_pieces(pieces, 0) == []

    def test_nested_guards_outer_to_inner(self):
        seen = []

        def guard(tag, result):
            def g(x):
                seen.append(tag)
                return result
            return g

        pieces = [
            Piece(guard("outer-false", False), [Piece(guard("never", True), lambda x: x)]),
            Piece(guard("outer-true", True), [
                Piece(guard("inner-a", True), lambda x: x, "a"),
                Piece(guard("inner-b", False), lambda x: x, "b"),
            ], "outer"),
        ]
        actions = resolve_pieces(pieces, 0)
        assert [a.name for a in actions] == ["outer/a"]
        assert seen == ["outer-false", "outer-true", "inner-a", "inner-b"]

    def test_positional_names(self):
        pieces = [Piece(always, lambda x: x), Piece(always, [Piece(always, lambda x: x)])]
        assert [a.name for a in resolve_pieces(pieces, 0)] == ["piece0", "piece1/piece0"]

    def test_actions_bound_to_configuration(self):
        (action,) = resolve_pieces([Piece(always, lambda x: x * 10)], 3)
        assert action.source == 3
        assert action() == frozenset({30})


class TestPiecewiseBuilder:

    def test_tuples_and_nesting(self):
        pieces = piecewise(
            (lambda x: x > 0, [
                (lambda x: x % 2 == 0, lambda x: x // 2, "even"),
                (lambda x: x % 2 == 1, lambda x: x - 1, "odd"),
            ], "pos"),
            Piece(lambda x: x == 0, lambda x: None, "stop"),
        )
        assert len(pieces) == 2
        assert [a.name for a in resolve_pieces(pieces, 4)] == ["pos/even"]
        assert [a.name for a in resolve_pieces(pieces, 0)] == ["stop"]
        assert resolve_pieces(pieces, 0)[0]() == frozenset()

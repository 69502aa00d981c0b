# tests/test_configuration.py
"""
Tests for the configuration identity contract and the State record.
"""

import pickle

import pytest

from str_checker.configuration import State, fingerprint, identity_key
from str_checker.errors import ConfigurationError


class TestState:

    def test_attribute_and_item_access(self):
        s = State(a="I", b="C")
        assert s.a == "I"
        assert s["b"] == "C"
        assert len(s) == 2
        assert list(s) == ["a", "b"]

    def test_with_returns_new_state(self):
        s = State(a="I", b="I")
        t = s.with_(a="C")
        assert s.a == "I"
        assert t.a == "C"
        assert t.b == "I"
        assert s is not t

    def test_with_unknown_variable(self):
        with pytest.raises(KeyError):
            State(a=1).with_(z=2)

    def test_immutable(self):
        s = State(a=1)
        with pytest.raises(AttributeError):
            s.a = 2
        with pytest.raises(AttributeError):
            del s.a

    def test_missing_attribute(self):
        with pytest.raises(AttributeError):
            State(a=1).nope

    def test_equality_ignores_field_order(self):
        assert State(a=1, b=2) == State(b=2, a=1)
        assert hash(State(a=1, b=2)) == hash(State(b=2, a=1))

    def test_not_equal_to_plain_dict(self):
        assert State(a=1) != {"a": 1}

    def test_distinct_values_differ(self):
        assert State(a=1) != State(a=2)
        assert len({State(a=1), State(a=1), State(a=2)}) == 2

    def test_mapping_constructor(self):
        assert State({"x": 1}, y=2) == State(x=1, y=2)

    def test_unhashable_value_rejected(self):
        with pytest.raises(ConfigurationError):
            State(xs=[1, 2])

    def test_repr_keeps_declaration_order(self):
        assert repr(State(b=1, a=2)) == "State(b=1, a=2)"

    def test_pickle_round_trip(self):
        s = State(a="W", n=3)
        assert pickle.loads(pickle.dumps(s)) == s

    def test_fingerprint_is_order_independent(self):
        assert State(a=1, b=2).fingerprint() == State(b=2, a=1).fingerprint()
        assert State(a=1).fingerprint() != State(a=2).fingerprint()


class TestIdentity:

    def test_identity_defaults_to_value(self):
        assert identity_key((1, 2)) == (1, 2)

    def test_key_function_applied(self):
        assert identity_key({"x": 1}, key=lambda d: tuple(sorted(d.items()))) == (("x", 1),)

    def test_unhashable_without_key(self):
        with pytest.raises(ConfigurationError) as info:
            identity_key([1, 2])
        assert info.value.code == "STR-1001"
        assert isinstance(info.value.cause, TypeError)

    def test_fingerprint_uses_state_digest(self):
        s = State(a=1)
        assert fingerprint(s) == s.fingerprint()

    def test_fingerprint_fallback_is_stable(self):
        assert fingerprint((1, "a")) == fingerprint((1, "a"))
        assert len(fingerprint(42)) == 32

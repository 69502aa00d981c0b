# str_checker/configuration.py
"""
Configuration equality contract.

A *configuration* is a complete snapshot of modeled-system state.  The
engine treats configurations as opaque values with one requirement: two
configurations are the same explored state iff their identity keys are
equal, and identity keys must be hashable.  By default the identity key is
the configuration itself, so any immutable, hashable value works (ints,
strings, tuples, frozensets, frozen dataclasses, :class:`State`).

Callers whose configurations are not directly hashable, or who want a
coarser notion of equality, pass a *key function* to the engine.

Successor configurations are always new values; nothing in the engine
mutates a configuration after it was produced.
"""

from __future__ import annotations

import hashlib
from collections.abc import Hashable, Mapping
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    Optional,
    Protocol,
    Tuple,
    runtime_checkable,
)

from .errors import ConfigurationError


KeyFunction = Callable[[Any], Hashable]


@runtime_checkable
class FingerprintedConfiguration(Protocol):
    """Configurations that know their own deterministic digest."""

    def fingerprint(self) -> str:
        ...


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

def identity_key(configuration: Any, key: Optional[KeyFunction] = None) -> Hashable:
    """Resolve the identity key of *configuration*.

    Raises :class:`ConfigurationError` if the key is not hashable.
    """
    k = key(configuration) if key is not None else configuration
    try:
        hash(k)
    except TypeError as exc:
        raise ConfigurationError(configuration, exc) from exc
    return k


def fingerprint(configuration: Any) -> str:
    """Return a deterministic hex digest for *configuration*.

    Uses the configuration's own ``fingerprint()`` when it has one,
    otherwise hashes its ``repr``.  Unlike ``hash()`` the result is stable
    across interpreter runs (no string hash randomisation), which makes it
    suitable for log lines and reports.
    """
    if isinstance(configuration, FingerprintedConfiguration):
        return configuration.fingerprint()
    return hashlib.sha256(repr(configuration).encode()).hexdigest()[:32]


# ---------------------------------------------------------------------------
# State — an immutable record of named variables
# ---------------------------------------------------------------------------

class State(Mapping):
    """Immutable, hashable assignment of values to named variables.

    ``State`` is the natural configuration type for models written as
    "a set of variables": successors are built copy-then-modify with
    :meth:`with_`, which never touches the receiver.

    >>> s = State(a="I", b="I")
    >>> t = s.with_(a="C")
    >>> (s.a, t.a)
    ('I', 'C')
    >>> t == State(b="I", a="C")
    True
    """

    __slots__ = ("_values", "_key", "_hash")

    def __init__(self, _values: Optional[Mapping] = None, **values: Any) -> None:
        merged: Dict[str, Any] = dict(_values or {})
        merged.update(values)
        key = tuple(sorted(merged.items(), key=lambda kv: kv[0]))
        try:
            h = hash(key)
        except TypeError as exc:
            raise ConfigurationError(merged, exc) from exc
        object.__setattr__(self, "_values", merged)
        object.__setattr__(self, "_key", key)
        object.__setattr__(self, "_hash", h)

    # -- Mapping protocol ------------------------------------------------

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    # -- Attribute access ------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(
                f"State has no variable {name!r}"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("State is immutable; use with_() to derive a successor")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("State is immutable")

    # -- Identity --------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, State):
            return self._key == other._key
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        if isinstance(other, State):
            return self._key != other._key
        return NotImplemented

    def __hash__(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"State({body})"

    def __reduce__(self) -> Tuple[Any, ...]:
        return (State, (dict(self._values),))

    # -- Derivation ------------------------------------------------------

    def with_(self, **changes: Any) -> "State":
        """Return a copy of this state with *changes* applied."""
        unknown = set(changes) - set(self._values)
        if unknown:
            raise KeyError(
                f"State has no variable(s) {', '.join(sorted(unknown))}"
            )
        merged = dict(self._values)
        merged.update(changes)
        return State(merged)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def fingerprint(self) -> str:
        return hashlib.sha256(repr(self._key).encode()).hexdigest()[:32]


__all__ = [
    "KeyFunction",
    "FingerprintedConfiguration",
    "identity_key",
    "fingerprint",
    "State",
]

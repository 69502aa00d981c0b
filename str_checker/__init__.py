"""
str_checker — Explicit-State Checking for Semantic Transition Relations
======================================================================

A small explicit-state model checker for systems whose transition relation
is given *intensionally*: a set of enabled actions per configuration plus an
execution function mapping an action and a configuration to its successor
configurations.

Core modules
------------
configuration
    Configuration identity contract and the immutable ``State`` record.
actions
    Actions and nested piecewise (guarded) definitions.
relation
    The ``SemanticTransitionRelation`` interface and concrete relations.
rooted_graph
    The rooted-graph abstraction and the ``STR2RG`` adapter.
exploration
    Reachability search with first-discovery parent tracing.
verifier
    Invariant and deadlock checking with counterexample traces.
config
    Exploration budgets, frontier strategy and logging setup.
errors
    The ``StrCheckError`` hierarchy.

Quick start
-----------
>>> from str_checker import State, Piece, PiecewiseRelation, PredicateVerifier
>>> rel = PiecewiseRelation(
...     roots=[State(a="I", b="I")],
...     pieces=[
...         Piece(lambda s: s.a == "I", lambda s: s.with_(a="C"), "a-enter"),
...         Piece(lambda s: s.a == "C", lambda s: s.with_(a="I"), "a-leave"),
...         Piece(lambda s: s.b == "I", lambda s: s.with_(b="C"), "b-enter"),
...         Piece(lambda s: s.b == "C", lambda s: s.with_(b="I"), "b-leave"),
...     ],
... )
>>> result = PredicateVerifier().check(rel, lambda s: not (s.a == s.b == "C"), "mutex")
>>> result.holds
False
>>> result.trace[-1]
State(a='C', b='C')
"""

from __future__ import annotations

import importlib
import logging
import sys
from typing import TYPE_CHECKING, List

# ---------------------------------------------------------------------------
# Package metadata
# ---------------------------------------------------------------------------

__version__ = "0.1.0"
__author__ = "str-checker contributors"
__license__ = "MIT"
__all__: List[str] = []          # populated below

_log = logging.getLogger(__name__)
_log.addHandler(logging.NullHandler())

# ---------------------------------------------------------------------------
# Registry: (module_name, list_of_names_to_re-export)
# ---------------------------------------------------------------------------

_CORE_MODULES = {
    "errors": [
        "StrCheckError",
        "ConfigurationError",
        "ContractViolationError",
        "TargetNotReachableError",
        "BudgetExceededError",
        "PredicateError",
        "InvalidConfigError",
    ],
    "config": [
        "ExplorationConfig",
        "configure_logging",
    ],
    "configuration": [
        "State",
        "identity_key",
        "fingerprint",
    ],
    "actions": [
        "Action",
        "Piece",
        "always",
        "piecewise",
    ],
    "relation": [
        "SemanticTransitionRelation",
        "STR",
        "PiecewiseRelation",
        "FunctionalRelation",
    ],
    "rooted_graph": [
        "RootedGraph",
        "STR2RG",
        "ExplicitRootedGraph",
        "as_rooted_graph",
    ],
    "exploration": [
        "ReachableSet",
        "ParentTracer",
        "TraceStep",
        "ReachabilityResult",
        "Reachability",
        "reachable",
    ],
    "verifier": [
        "VerificationStatus",
        "Counterexample",
        "VerificationResult",
        "PredicateVerifier",
        "check",
        "check_deadlock_free",
    ],
}


def _import_names(module_rel_name: str, names: List[str]) -> None:
    """Import *names* from a submodule and bind them in the package namespace."""
    fq_name = f"{__name__}.{module_rel_name}"
    try:
        mod = importlib.import_module(fq_name)
    except ImportError as exc:
        raise ImportError(
            f"str_checker: required submodule '{module_rel_name}' "
            f"failed to import: {exc}"
        ) from exc

    current_module = sys.modules[__name__]
    for name in names:
        obj = getattr(mod, name, None)
        if obj is None:
            raise AttributeError(
                f"str_checker.{module_rel_name} does not export '{name}'"
            )
        setattr(current_module, name, obj)
        __all__.append(name)

    setattr(current_module, module_rel_name, mod)
    if module_rel_name not in __all__:
        __all__.append(module_rel_name)


for _mod, _names in _CORE_MODULES.items():
    _import_names(_mod, _names)

del _mod, _names


def list_submodules() -> List[str]:
    """Return the names of all submodules in the package."""
    return sorted(_CORE_MODULES)


def package_info() -> dict:
    """Return a dict of metadata about the package, for diagnostics."""
    return {
        "package": __name__,
        "version": __version__,
        "python": sys.version,
        "submodules": list_submodules(),
        "all_exports": list(__all__),
    }


__all__ += ["list_submodules", "package_info", "__version__"]

if TYPE_CHECKING:
    from .errors import (
        StrCheckError as StrCheckError,
        ConfigurationError as ConfigurationError,
        ContractViolationError as ContractViolationError,
        TargetNotReachableError as TargetNotReachableError,
        BudgetExceededError as BudgetExceededError,
        PredicateError as PredicateError,
        InvalidConfigError as InvalidConfigError,
    )
    from .config import (
        ExplorationConfig as ExplorationConfig,
        configure_logging as configure_logging,
    )
    from .configuration import (
        State as State,
        identity_key as identity_key,
        fingerprint as fingerprint,
    )
    from .actions import (
        Action as Action,
        Piece as Piece,
        always as always,
        piecewise as piecewise,
    )
    from .relation import (
        SemanticTransitionRelation as SemanticTransitionRelation,
        STR as STR,
        PiecewiseRelation as PiecewiseRelation,
        FunctionalRelation as FunctionalRelation,
    )
    from .rooted_graph import (
        RootedGraph as RootedGraph,
        STR2RG as STR2RG,
        ExplicitRootedGraph as ExplicitRootedGraph,
        as_rooted_graph as as_rooted_graph,
    )
    from .exploration import (
        ReachableSet as ReachableSet,
        ParentTracer as ParentTracer,
        TraceStep as TraceStep,
        ReachabilityResult as ReachabilityResult,
        Reachability as Reachability,
        reachable as reachable,
    )
    from .verifier import (
        VerificationStatus as VerificationStatus,
        Counterexample as Counterexample,
        VerificationResult as VerificationResult,
        PredicateVerifier as PredicateVerifier,
        check as check,
        check_deadlock_free as check_deadlock_free,
    )

# str_checker/errors.py
"""
Error types for the str_checker exploration engine.

Error Hierarchy:
────────────────
    StrCheckError (base)
    ├── ConfigurationError       - configuration has no usable identity key
    ├── ContractViolationError   - action executed outside its source configuration
    ├── TargetNotReachableError  - traceback on an unrecorded configuration
    ├── BudgetExceededError      - exploration budget exhausted
    ├── PredicateError           - a checked predicate raised
    └── InvalidConfigError       - ExplorationConfig failed validation

Error Codes:
────────────
Each error has a code of the form STR-XXXX:
  - 1000-1999: Configuration identity errors
  - 2000-2999: Relation contract errors
  - 3000-3999: Lookup errors
  - 4000-4999: Resource exhaustion
  - 5000-5999: Predicate evaluation errors
  - 6000-6999: Engine configuration errors

Safety violations and deadlocks are *not* errors; they are reported as
``VerificationResult`` values by :mod:`str_checker.verifier`.
"""

from __future__ import annotations

from typing import Any, Optional


# ───────────────────────────────────────────────────────────────────────────────
# ERROR CODES
# ───────────────────────────────────────────────────────────────────────────────

class ErrorCode:
    """Structured error code, rendered as ``PREFIX-NNNN``."""

    __slots__ = ("prefix", "number", "title")

    def __init__(self, prefix: str, number: int, title: str) -> None:
        self.prefix = prefix
        self.number = number
        self.title = title

    @property
    def code(self) -> str:
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.title!r})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class ErrorCodes:
    """Predefined error codes."""

    GENERIC = ErrorCode("STR", 0, "str_checker error")
    UNHASHABLE_CONFIGURATION = ErrorCode("STR", 1001, "unhashable configuration")
    ACTION_SOURCE_MISMATCH = ErrorCode("STR", 2001, "action source mismatch")
    TARGET_NOT_REACHABLE = ErrorCode("STR", 3001, "target not reachable")
    BUDGET_EXCEEDED = ErrorCode("STR", 4001, "exploration budget exceeded")
    PREDICATE_RAISED = ErrorCode("STR", 5001, "predicate raised")
    INVALID_CONFIG = ErrorCode("STR", 6001, "invalid exploration config")


# ───────────────────────────────────────────────────────────────────────────────
# BASE EXCEPTION
# ───────────────────────────────────────────────────────────────────────────────

class StrCheckError(Exception):
    """
    Base exception for all str_checker errors.

    Carries an :class:`ErrorCode` and an optional hint that is appended to
    the rendered message.
    """

    default_code: ErrorCode = ErrorCodes.GENERIC

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        hint: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.hint = hint

    def with_hint(self, hint: str) -> "StrCheckError":
        """Attach a hint to this error."""
        self.hint = hint
        return self

    def __str__(self) -> str:
        text = f"[{self.code}] {self.message}"
        if self.hint:
            text += f" (hint: {self.hint})"
        return text


# ───────────────────────────────────────────────────────────────────────────────
# SPECIALISED ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class ConfigurationError(StrCheckError):
    """A configuration (or its identity key) cannot be hashed."""

    default_code = ErrorCodes.UNHASHABLE_CONFIGURATION

    def __init__(self, configuration: Any, cause: Optional[BaseException] = None) -> None:
        super().__init__(
            f"Configuration {configuration!r} has no hashable identity",
            hint="use an immutable value such as a tuple, frozenset or State, "
                 "or pass a key function",
        )
        self.configuration = configuration
        self.cause = cause


class ContractViolationError(StrCheckError):
    """An action was executed against a configuration it was not enabled in."""

    default_code = ErrorCodes.ACTION_SOURCE_MISMATCH

    def __init__(self, action: Any, configuration: Any) -> None:
        super().__init__(
            f"Action {action!r} executed against {configuration!r}, "
            f"but it was enabled in {getattr(action, 'source', None)!r}",
            hint="only execute actions returned by enabled() for the same configuration",
        )
        self.action = action
        self.configuration = configuration


class TargetNotReachableError(StrCheckError, LookupError):
    """``traceback`` was asked for a configuration that was never recorded."""

    default_code = ErrorCodes.TARGET_NOT_REACHABLE

    def __init__(self, target: Any) -> None:
        super().__init__(f"No such reachable configuration: {target!r}")
        self.target = target


class BudgetExceededError(StrCheckError):
    """The exploration budget ran out before the frontier was exhausted."""

    default_code = ErrorCodes.BUDGET_EXCEEDED

    def __init__(self, reason: str, partial: Any = None) -> None:
        super().__init__(
            f"Exploration budget exceeded: {reason}",
            hint="the reachable set may be infinite; raise max_configurations "
                 "or max_seconds",
        )
        self.reason = reason
        self.partial = partial


class PredicateError(StrCheckError):
    """A checked predicate raised instead of returning a boolean."""

    default_code = ErrorCodes.PREDICATE_RAISED

    def __init__(self, name: str, configuration: Any, cause: BaseException) -> None:
        super().__init__(
            f"Predicate '{name}' raised {type(cause).__name__} on "
            f"{configuration!r}: {cause}"
        )
        self.name = name
        self.configuration = configuration
        self.cause = cause


class InvalidConfigError(StrCheckError, ValueError):
    """``ExplorationConfig.check()`` found one or more problems."""

    default_code = ErrorCodes.INVALID_CONFIG

    def __init__(self, problems: list) -> None:
        super().__init__("Invalid exploration config: " + "; ".join(problems))
        self.problems = list(problems)


__all__ = [
    "ErrorCode",
    "ErrorCodes",
    "StrCheckError",
    "ConfigurationError",
    "ContractViolationError",
    "TargetNotReachableError",
    "BudgetExceededError",
    "PredicateError",
    "InvalidConfigError",
]

"""Rule chains (handlers) for sluice.

A handler owns an ordered, append-only list of rules plus the
optional / nullable / default configuration for one field. Builder
methods append a rule and return the same handler, so declarations
compose fluently:

    integer("Must be an integer").min(0).max(5, "Too large")

check() runs the rules in append order, awaiting each one, and stops at
the first result that is not literally True.
"""

import logging
import math
import re
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from sluice.errors import MissingDefaultError
from sluice.types import MISSING, DefaultFn, ErrorPayload, Rule, RuleResult
from sluice.utils import resolve

logger = logging.getLogger(__name__)

H = TypeVar("H", bound="Handler")


# =============================================================================
# Kind Predicates
# =============================================================================


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_number(value: Any) -> bool:
    """Numbers are int or float; bool is not a number here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    """Whole numbers, including finite floats without a fractional part."""
    if not is_number(value):
        return False
    if isinstance(value, float):
        return math.isfinite(value) and value.is_integer()
    return True


def is_float(value: Any) -> bool:
    """Finite numbers with a non-zero fractional part."""
    return is_number(value) and math.isfinite(value) and value % 1 != 0


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_object(value: Any) -> bool:
    """Any present, non-scalar value (mappings, lists, attribute objects)."""
    if value is None or value is MISSING:
        return False
    if isinstance(value, Mapping):
        return True
    return not isinstance(value, (str, bytes, int, float, bool))


def strict_equals(a: Any, b: Any) -> bool:
    """Equality that does not conflate bool with int (True != 1)."""
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return a == b


def _failure(err: ErrorPayload) -> RuleResult:
    """Failure value for a built-in rule: the caller's payload, else False."""
    return err if err is not None else False


def predicate_rule(predicate: Callable[[Any], Any], err: ErrorPayload) -> Rule:
    """Wrap a one-argument predicate as a (value, key, root) rule."""

    def rule(value: Any, key: str, root: Any) -> RuleResult:
        return True if predicate(value) else _failure(err)

    return rule


# =============================================================================
# Base Handler
# =============================================================================


class Handler:
    """Base rule chain shared by every kind.

    Attributes:
        kind: Name of the value kind this handler checks
    """

    kind = "any"

    def __init__(self) -> None:
        self._rules: list[Rule] = []
        self._optional = False
        self._nullable = False
        self._has_default = False
        self._default: Any = None

    def __repr__(self) -> str:
        flags = []
        if self._optional:
            flags.append("optional")
        if self._nullable:
            flags.append("nullable")
        if self._has_default:
            flags.append(f"default={self._default!r}")
        suffix = f" {' '.join(flags)}" if flags else ""
        return f"<{type(self).__name__} rules={len(self._rules)}{suffix}>"

    def __len__(self) -> int:
        return len(self._rules)

    def _push(self: H, predicate: Callable[[Any], Any], err: ErrorPayload = None) -> H:
        self._rules.append(predicate_rule(predicate, err))
        return self

    def append(self: H, rule: Rule) -> H:
        """Append a raw (value, key, root) rule to the chain."""
        self._rules.append(rule)
        return self

    async def check(self, value: Any, key: str, root: Any) -> RuleResult:
        """Run the rules in order.

        Args:
            value: The field value
            key: The field path
            root: The root container

        Returns:
            True if every rule passed, otherwise the first failing rule's
            result. Rules after the failing one are never called.
        """
        for rule in self._rules:
            logger.debug("Checking rule for %s", key)
            result = await resolve(rule(value, key, root))
            if result is not True:
                logger.debug("Rule failed for %s", key)
                return result
        logger.debug("%s OK", key)
        return True

    def custom(self: H, func: Rule) -> H:
        """Append a custom rule called with (value, key, root).

        The function may be async. It must return True to pass; any other
        value (False, a message, a code) is the failure result.
        """
        return self.append(func)

    def optional(self: H) -> H:
        """Tolerate the field being absent."""
        self._optional = True
        return self

    def nullable(self: H) -> H:
        """Accept a present None without running the rules."""
        self._nullable = True
        return self

    def default(self: H, value: Any | DefaultFn) -> H:
        """Set the value written when the field is absent and optional.

        A callable is invoked with the root container every time the
        default is applied; a class (list, dict, ...) is instantiated with
        no arguments instead. None is a valid explicit default.
        """
        self._default = value
        self._has_default = True
        return self

    def is_optional(self) -> bool:
        return self._optional

    def is_nullable(self) -> bool:
        return self._nullable

    def has_default(self) -> bool:
        return self._has_default

    def get_default(self, root: Any) -> Any:
        """Resolve the default for this root.

        Raises:
            MissingDefaultError: If default() was never called
        """
        if not self._has_default:
            raise MissingDefaultError(f"{type(self).__name__} has no default value")
        if isinstance(self._default, type):
            return self._default()
        if callable(self._default):
            return self._default(root)
        return self._default


# =============================================================================
# Kinds
# =============================================================================


class StringHandler(Handler):
    kind = "string"

    def __init__(self, err: ErrorPayload = None) -> None:
        super().__init__()
        self._push(is_string, err)

    def equals(self, val: str, err: ErrorPayload = None) -> "StringHandler":
        return self._push(lambda v: v == val, err)

    def min(self, length: int, err: ErrorPayload = None) -> "StringHandler":
        """Require at least `length` characters."""
        return self._push(lambda v: len(v) >= length, err)

    def max(self, length: int, err: ErrorPayload = None) -> "StringHandler":
        """Require at most `length` characters."""
        return self._push(lambda v: len(v) <= length, err)

    def length(self, length: int, err: ErrorPayload = None) -> "StringHandler":
        return self._push(lambda v: len(v) == length, err)

    def matches(self, pattern: str | re.Pattern, err: ErrorPayload = None) -> "StringHandler":
        """Require the pattern to match anywhere in the string."""
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        return self._push(lambda v: regex.search(v) is not None, err)

    def one_of(self, values: list[str], err: ErrorPayload = None) -> "StringHandler":
        allowed = frozenset(values)
        return self._push(lambda v: v in allowed, err)


class NumberHandler(Handler):
    kind = "number"

    def __init__(self, err: ErrorPayload = None) -> None:
        super().__init__()
        self._push(is_number, err)

    def equals(self, val: float, err: ErrorPayload = None) -> "NumberHandler":
        return self._push(lambda v: v == val, err)

    def min(self, val: float, err: ErrorPayload = None) -> "NumberHandler":
        """Require value >= val."""
        return self._push(lambda v: v >= val, err)

    def max(self, val: float, err: ErrorPayload = None) -> "NumberHandler":
        """Require value <= val."""
        return self._push(lambda v: v <= val, err)


class BooleanHandler(Handler):
    kind = "boolean"

    def __init__(self, err: ErrorPayload = None) -> None:
        super().__init__()
        self._push(is_boolean, err)

    def equals(self, val: bool, err: ErrorPayload = None) -> "BooleanHandler":
        return self._push(lambda v: v is val, err)

    def true(self, err: ErrorPayload = None) -> "BooleanHandler":
        return self._push(lambda v: v is True, err)

    def false(self, err: ErrorPayload = None) -> "BooleanHandler":
        return self._push(lambda v: v is False, err)


class ArrayHandler(Handler):
    """Array rule chain.

    Element-kind rules land on the same chain as length rules, so
    `array().of.integers().min(1)` reads as "array of integers, at least
    one element".
    """

    kind = "array"

    def __init__(self, err: ErrorPayload = None) -> None:
        super().__init__()
        self._push(is_array, err)

    @property
    def of(self) -> "ArrayHandler":
        """Element view; returns this same handler."""
        return self

    def min(self, length: int, err: ErrorPayload = None) -> "ArrayHandler":
        return self._push(lambda v: len(v) >= length, err)

    def max(self, length: int, err: ErrorPayload = None) -> "ArrayHandler":
        return self._push(lambda v: len(v) <= length, err)

    def includes(self, val: Any, err: ErrorPayload = None) -> "ArrayHandler":
        return self._push(lambda v: any(strict_equals(item, val) for item in v), err)

    def contains(self, val: Any, err: ErrorPayload = None) -> "ArrayHandler":
        """Alias for includes()."""
        return self.includes(val, err)

    def strings(self, err: ErrorPayload = None) -> "ArrayHandler":
        return self.every(is_string, err)

    def numbers(self, err: ErrorPayload = None) -> "ArrayHandler":
        return self.every(is_number, err)

    def integers(self, err: ErrorPayload = None) -> "ArrayHandler":
        return self.every(is_integer, err)

    def floats(self, err: ErrorPayload = None) -> "ArrayHandler":
        return self.every(is_float, err)

    def arrays(self, err: ErrorPayload = None) -> "ArrayHandler":
        return self.every(is_array, err)

    def objects(self, err: ErrorPayload = None) -> "ArrayHandler":
        return self.every(is_object, err)

    def every(self, func: Callable[[Any], Any], err: ErrorPayload = None) -> "ArrayHandler":
        """Require func to hold for every element (vacuously true when empty).

        func may be async; elements are checked in order and the first
        falsy result stops the scan.
        """

        async def rule(value: Any, key: str, root: Any) -> RuleResult:
            for item in value:
                if not await resolve(func(item)):
                    return _failure(err)
            return True

        return self.append(rule)

    def some(self, func: Callable[[Any], Any], err: ErrorPayload = None) -> "ArrayHandler":
        """Require func to hold for at least one element. func may be async."""

        async def rule(value: Any, key: str, root: Any) -> RuleResult:
            for item in value:
                if await resolve(func(item)):
                    return True
            return _failure(err)

        return self.append(rule)

    def all(self, func: Callable[[Any], Any], err: ErrorPayload = None) -> "ArrayHandler":
        """Alias for every()."""
        return self.every(func, err)

    def any(self, func: Callable[[Any], Any], err: ErrorPayload = None) -> "ArrayHandler":
        """Alias for some()."""
        return self.some(func, err)


class ObjectHandler(Handler):
    kind = "object"

    def __init__(self, err: ErrorPayload = None) -> None:
        super().__init__()
        self._push(is_object, err)


class AnyHandler(Handler):
    kind = "any"

    def __init__(self, err: ErrorPayload = None) -> None:
        super().__init__()
        self._push(lambda v: v is not MISSING, err)

    def equals(self, val: Any, err: ErrorPayload = None) -> "AnyHandler":
        return self._push(lambda v: strict_equals(v, val), err)

"""Kind constructors.

Factories returning a fresh, preconfigured handler per call. integer and
float are number chains with one more rule appended; they share the
NumberHandler builders (min, max, equals).
"""

from sluice.handlers import (
    AnyHandler,
    ArrayHandler,
    BooleanHandler,
    NumberHandler,
    ObjectHandler,
    StringHandler,
    is_float,
    is_integer,
    predicate_rule,
)
from sluice.types import ErrorPayload


def string(err: ErrorPayload = None) -> StringHandler:
    """Require the value to be a string."""
    return StringHandler(err)


def number(err: ErrorPayload = None) -> NumberHandler:
    """Require the value to be a number (int or float, not bool)."""
    return NumberHandler(err)


def integer(err: ErrorPayload = None) -> NumberHandler:
    """Require the value to be a whole number."""
    return NumberHandler(err).append(predicate_rule(is_integer, err))


def int_(err: ErrorPayload = None) -> NumberHandler:
    """Alias for integer()."""
    return integer(err)


def float_(err: ErrorPayload = None) -> NumberHandler:
    """Require the value to be a number with a fractional part."""
    return NumberHandler(err).append(predicate_rule(is_float, err))


def boolean(err: ErrorPayload = None) -> BooleanHandler:
    return BooleanHandler(err)


def array(err: ErrorPayload = None) -> ArrayHandler:
    return ArrayHandler(err)


def object_(err: ErrorPayload = None) -> ObjectHandler:
    return ObjectHandler(err)


def any_(err: ErrorPayload = None) -> AnyHandler:
    """Require the value to be present (anything, including None)."""
    return AnyHandler(err)

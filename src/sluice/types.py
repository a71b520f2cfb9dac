"""Core types for the sluice validation engine.

This module defines the values shared by every layer:
- MISSING: the "absent" marker, distinct from a present None
- Rule / transform / hook callable signatures
- ErrorPayload: what a failing rule hands back to the caller
"""

from collections.abc import Awaitable, Callable
from typing import Any, Union


class _Missing:
    """Marker for a value that is not present in the root container.

    None is a real value (JSON null); MISSING means the path resolved to
    nothing at all.
    """

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "<MISSING>"

    def __copy__(self) -> "_Missing":
        return self

    def __deepcopy__(self, memo: dict) -> "_Missing":
        return self


MISSING: Any = _Missing()

# Caller-supplied failure payload. None means "fall back to False".
ErrorPayload = Union[str, int, None]

# What a rule (and therefore a chain) produces: True passes, anything else fails.
RuleResult = Union[bool, int, str]

# Rule signature: (value, key, root) -> RuleResult, sync or async
Rule = Callable[[Any, str, Any], Union[RuleResult, Awaitable[RuleResult]]]

# Transform signature: (value, key, root) -> new value, sync or async
TransformFn = Callable[[Any, str, Any], Any]

# Lifecycle hook signature: (value, key, root) -> None, sync or async
HookFn = Callable[[Any, str, Any], Union[None, Awaitable[None]]]

# onSuccess signature: (root) -> None, sync or async
SuccessFn = Callable[[Any], Union[None, Awaitable[None]]]

# Default factory: (root) -> default value
DefaultFn = Callable[[Any], Any]


def is_missing(value: Any) -> bool:
    """Check whether a value is the MISSING marker."""
    return value is MISSING

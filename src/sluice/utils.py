"""Small helpers shared across sluice modules."""

import inspect
from collections.abc import Callable, Sequence
from typing import Any


async def resolve(value: Any) -> Any:
    """Await value if it is awaitable, otherwise return it unchanged.

    Rules, transforms and hooks may be plain functions or coroutines;
    every call site goes through this so both styles run in order.
    """
    if inspect.isawaitable(value):
        return await value
    return value


def normalize_to_tuple(value: Callable[..., Any] | Sequence[Callable[..., Any]] | None) -> tuple:
    """Normalize a single callable, a sequence of callables or None to a tuple."""
    if value is None:
        return ()
    if callable(value):
        return (value,)
    return tuple(value)

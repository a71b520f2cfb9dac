"""Engine options and environment settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from sluice.types import HookFn, SuccessFn
from sluice.utils import normalize_to_tuple


def _noop(*args: Any) -> None:
    return None


# camelCase keys accepted by from_dict -> dataclass field names
_OPTION_KEYS = {
    "before": "before",
    "after": "after",
    "transformBefore": "transform_before",
    "transformAfter": "transform_after",
    "onSuccess": "on_success",
    "onFail": "on_fail",
    "onDefault": "on_default",
}


@dataclass(frozen=True)
class ValidatorOptions:
    """Global lifecycle hooks shared by every validate() call on an engine.

    before/after/transform_before/transform_after accept a single callable
    or a sequence; they are stored as tuples and run in order. An empty
    transform tuple leaves the value untouched.

    Attributes:
        before: Hooks run with (value, key, root) before any checks
        transform_before: Transforms applied before the rule check
        transform_after: Transforms applied after a passing rule check
        after: Hooks run with the final value after transforms
        on_success: Called with the root once every field passed
        on_fail: Called with (value, key, root) for the failing field
        on_default: Called with (value, key, root) after a default is written
    """

    before: Any = ()
    transform_before: Any = ()
    transform_after: Any = ()
    after: Any = ()
    on_success: SuccessFn | None = None
    on_fail: HookFn | None = None
    on_default: HookFn | None = None

    def __post_init__(self) -> None:
        for name in ("before", "transform_before", "transform_after", "after"):
            object.__setattr__(self, name, normalize_to_tuple(getattr(self, name)))
        for name in ("on_success", "on_fail", "on_default"):
            if getattr(self, name) is None:
                object.__setattr__(self, name, _noop)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidatorOptions:
        """Create options from a dict using camelCase or snake_case keys.

        Raises:
            ValueError: For unrecognized option names
        """
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _OPTION_KEYS.get(key, key)
            if name not in _OPTION_KEYS.values():
                raise ValueError(
                    f"Unknown validator option '{key}'. "
                    "Available options: " + ", ".join(_OPTION_KEYS)
                )
            kwargs[name] = value
        return cls(**kwargs)


@dataclass
class SluiceSettings:
    """Process settings for the command line tool."""

    log_level: str = "WARNING"
    payload_format: str = "auto"

    @classmethod
    def from_env(cls) -> SluiceSettings:
        """Create settings from SLUICE_LOG_LEVEL and SLUICE_PAYLOAD_FORMAT."""
        return cls(
            log_level=os.environ.get("SLUICE_LOG_LEVEL", "WARNING").upper(),
            payload_format=os.environ.get("SLUICE_PAYLOAD_FORMAT", "auto").lower(),
        )

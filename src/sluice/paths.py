"""Dotted-path access into nested root containers.

Paths are dot-separated segments ("body.user.email", "items.0.name").
Each segment is resolved against the current container:
- Mappings: key lookup
- Lists/tuples: decimal index
- Any other non-scalar object: attribute lookup (request-like objects)

Reads never raise for a missing segment; they return MISSING.
Writes create missing intermediate containers as empty dicts.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any

from sluice.errors import PathError
from sluice.types import MISSING

SEPARATOR = "."

# Values that can never hold children
_SCALARS = (str, bytes, bytearray, int, float, complex, bool, type(None))


def split_path(path: str) -> list[str]:
    """Split a dotted path into its segments.

    Raises:
        PathError: If the path is empty or not a string
    """
    if not isinstance(path, str) or not path:
        raise PathError(str(path), "path must be a non-empty string")
    return path.split(SEPARATOR)


def _index(segment: str) -> int | None:
    if segment.isdigit():
        return int(segment)
    return None


def _get_child(container: Any, segment: str) -> Any:
    """Resolve a single segment; MISSING if it does not exist."""
    if isinstance(container, Mapping):
        return container.get(segment, MISSING)

    if isinstance(container, (list, tuple)):
        idx = _index(segment)
        if idx is None or idx >= len(container):
            return MISSING
        return container[idx]

    if isinstance(container, _SCALARS) or container is MISSING:
        return MISSING

    return getattr(container, segment, MISSING)


def _set_child(container: Any, segment: str, value: Any, path: str) -> None:
    if isinstance(container, MutableMapping):
        container[segment] = value
        return

    if isinstance(container, list):
        idx = _index(segment)
        if idx is None or idx > len(container):
            raise PathError(path, f"cannot write index '{segment}' of a list of length {len(container)}")
        if idx == len(container):
            container.append(value)
        else:
            container[idx] = value
        return

    if isinstance(container, (_SCALARS, Mapping, tuple)):
        raise PathError(path, f"segment '{segment}' is not writable on {type(container).__name__}")

    setattr(container, segment, value)


def get_path(root: Any, path: str) -> Any:
    """Read the value at path, or MISSING if any segment is absent.

    A None in the middle of the path also resolves to MISSING, since it
    cannot hold children.
    """
    current = root
    for segment in split_path(path):
        current = _get_child(current, segment)
        if current is MISSING:
            return MISSING
    return current


def has_path(root: Any, path: str) -> bool:
    """Check if a value (possibly None) is present at path."""
    return get_path(root, path) is not MISSING


def set_path(root: Any, path: str, value: Any) -> None:
    """Write value at path, mutating root in place.

    Missing intermediate segments are created as empty dicts.

    Raises:
        PathError: If an intermediate segment holds a value that cannot
            contain children (e.g. a string or number)
    """
    segments = split_path(path)
    current = root

    for segment in segments[:-1]:
        child = _get_child(current, segment)
        if child is MISSING:
            child = {}
            _set_child(current, segment, child, path)
        elif isinstance(child, _SCALARS):
            raise PathError(path, f"segment '{segment}' holds a {type(child).__name__}")
        current = child

    _set_child(current, segments[-1], value, path)

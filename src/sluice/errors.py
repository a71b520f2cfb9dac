"""Exception hierarchy for sluice.

Validation failures are never raised: they are the return value of
ValidationEngine.validate(). The exceptions here cover programming errors
(bad paths, missing defaults) and the boundary signals raised by adapters.
"""

from typing import Any


class SluiceError(Exception):
    """Base class for all sluice errors."""


class PathError(SluiceError, ValueError):
    """Raised when a path is malformed or cannot be written."""

    def __init__(self, path: str, message: str):
        super().__init__(f"Invalid path '{path}': {message}")
        self.path = path


class MissingDefaultError(SluiceError, LookupError):
    """Raised when get_default() is called on a handler without a default."""


class AdapterError(SluiceError):
    """Generic failure signal raised by adapters at the calling boundary.

    Attributes:
        code: Machine-readable code ("BAD_REQUEST", "SERVER_ERROR")
        status_code: HTTP-style status for the failure
    """

    code = "ADAPTER_ERROR"
    status_code = 500

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "status": self.status_code,
            "message": str(self),
        }


class BadRequestError(AdapterError):
    """Validation rejected the input."""

    code = "BAD_REQUEST"
    status_code = 400


class ServerError(AdapterError):
    """A rule, transform or hook raised during validation."""

    code = "SERVER_ERROR"
    status_code = 500

"""sluice — async rule-chain validation for nested payloads.

Usage:
    from sluice import FieldRule, ValidationEngine, integer, string

    engine = ValidationEngine(on_fail=report_failure)

    result = await engine.validate(payload, [
        FieldRule("body.name", string().min(1, "Name required")),
        FieldRule("body.age", integer().optional().default(18).min(18, "18+")),
    ])
    if result is not True:
        ...  # False or the failing rule's payload
"""

from sluice.adapters import connect, context, resolver
from sluice.config import SluiceSettings, ValidatorOptions
from sluice.engine import FieldRule, ValidationEngine, to_field_rules
from sluice.errors import (
    AdapterError,
    BadRequestError,
    MissingDefaultError,
    PathError,
    ServerError,
    SluiceError,
)
from sluice.handlers import (
    AnyHandler,
    ArrayHandler,
    BooleanHandler,
    Handler,
    NumberHandler,
    ObjectHandler,
    StringHandler,
)
from sluice.kinds import (
    any_,
    array,
    boolean,
    float_,
    int_,
    integer,
    number,
    object_,
    string,
)
from sluice.paths import get_path, has_path, set_path
from sluice.types import MISSING, is_missing

__all__ = [
    # Engine
    "FieldRule",
    "ValidationEngine",
    "ValidatorOptions",
    "SluiceSettings",
    "to_field_rules",
    # Handlers
    "Handler",
    "AnyHandler",
    "ArrayHandler",
    "BooleanHandler",
    "NumberHandler",
    "ObjectHandler",
    "StringHandler",
    # Kinds
    "any_",
    "array",
    "boolean",
    "float_",
    "int_",
    "integer",
    "number",
    "object_",
    "string",
    # Paths
    "MISSING",
    "get_path",
    "has_path",
    "is_missing",
    "set_path",
    # Adapters
    "connect",
    "context",
    "resolver",
    # Errors
    "AdapterError",
    "BadRequestError",
    "MissingDefaultError",
    "PathError",
    "ServerError",
    "SluiceError",
]

"""Validation orchestrator.

Runs an ordered list of field declarations against a root container.
For each field, in declaration order:
1. before hooks (global, then field)
2. presence check; absent optional fields may receive a default
3. transform_before (global, then field), written back after each step
4. rule check; the first failure aborts the whole call
5. transform_after (global, then field), written back after each step
6. after hooks (global, then field)

When every field passes, on_success(root) runs and validate() returns True.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from sluice import kinds
from sluice.config import ValidatorOptions
from sluice.handlers import (
    AnyHandler,
    ArrayHandler,
    BooleanHandler,
    Handler,
    NumberHandler,
    ObjectHandler,
    StringHandler,
)
from sluice.paths import get_path, set_path
from sluice.types import MISSING, ErrorPayload, RuleResult
from sluice.utils import normalize_to_tuple, resolve

logger = logging.getLogger(__name__)


@dataclass
class FieldRule:
    """One field declaration.

    Field-level hooks and transforms run after the global ones configured
    on the engine; they add to them, never replace them.

    Attributes:
        key: Dotted path of the field in the root container
        handler: Rule chain for the field
        before: Hook(s) run before the presence check
        after: Hook(s) run after the post-check transforms
        transform_before: Transform(s) applied before the rule check
        transform_after: Transform(s) applied after a passing rule check
    """

    key: str
    handler: Handler
    before: Any = ()
    after: Any = ()
    transform_before: Any = ()
    transform_after: Any = ()

    def __post_init__(self) -> None:
        if not isinstance(self.handler, Handler):
            raise TypeError(
                f"Field '{self.key}' needs a Handler, got {type(self.handler).__name__}"
            )
        self.before = normalize_to_tuple(self.before)
        self.after = normalize_to_tuple(self.after)
        self.transform_before = normalize_to_tuple(self.transform_before)
        self.transform_after = normalize_to_tuple(self.transform_after)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FieldRule:
        """Create a FieldRule from {key, handler, before, after, transformBefore, transformAfter}."""
        return cls(
            key=data["key"],
            handler=data["handler"],
            before=data.get("before"),
            after=data.get("after"),
            transform_before=data.get("transformBefore", data.get("transform_before")),
            transform_after=data.get("transformAfter", data.get("transform_after")),
        )


def to_field_rules(fields: Sequence[FieldRule | Mapping[str, Any]]) -> list[FieldRule]:
    """Normalize a declaration list of FieldRules and/or dicts.

    Raises:
        TypeError: If fields is not a list or tuple
    """
    if not isinstance(fields, (list, tuple)):
        raise TypeError(f"Field declarations must be a list, got {type(fields).__name__}")
    return [f if isinstance(f, FieldRule) else FieldRule.from_dict(f) for f in fields]


class ValidationEngine:
    """Validates and transforms root containers against field declarations.

    The engine holds only its (frozen) options, so one instance can serve
    concurrent validate() calls as long as they use distinct roots.

    Example:
        engine = ValidationEngine(on_fail=log_failure)
        result = await engine.validate(payload, [
            FieldRule("body.email", engine.string().matches(r"@")),
            FieldRule("body.age", engine.integer().optional().min(18, "18+")),
        ])
    """

    def __init__(self, options: ValidatorOptions | None = None, **hooks: Any):
        if options is not None and hooks:
            raise TypeError("Pass either a ValidatorOptions instance or hook keywords, not both")
        self.options = options if options is not None else ValidatorOptions(**hooks)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidationEngine:
        """Create an engine from a camelCase options dict (onFail, transformBefore, ...)."""
        return cls(ValidatorOptions.from_dict(data))

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    async def validate(
        self,
        root: Any,
        fields: Sequence[FieldRule | Mapping[str, Any]],
    ) -> RuleResult:
        """Validate root against the field declarations.

        Args:
            root: The container to validate; mutated in place by transforms
                and defaults
            fields: Ordered field declarations (FieldRule or dict)

        Returns:
            True if every field passed, otherwise the failing field's result
            (False for a missing required field, or the failing rule's payload).
            Exceptions from rules, transforms and hooks propagate.
        """
        rules = to_field_rules(fields)
        options = self.options

        logger.debug("Validating object with %d field(s)", len(rules))

        for rule in rules:
            key = rule.key
            handler = rule.handler
            value = get_path(root, key)
            logger.debug("Validating key %s", key)

            await self._run_hooks(options.before + rule.before, value, key, root)

            if value is MISSING:
                if not handler.is_optional():
                    logger.debug("%s is missing and not optional: validation failed", key)
                    await resolve(options.on_fail(value, key, root))
                    return False

                if handler.has_default():
                    logger.debug("Setting %s to default value", key)
                    default = await resolve(handler.get_default(root))
                    set_path(root, key, default)
                    await resolve(options.on_default(default, key, root))
                else:
                    logger.debug("%s is missing and optional", key)
                continue

            value = await self._apply_transforms(
                options.transform_before + rule.transform_before, value, key, root
            )

            if value is None and handler.is_nullable():
                logger.debug("%s is null and nullable: skipping rules", key)
            else:
                result = await handler.check(value, key, root)
                if result is not True:
                    logger.debug("Validation failed for %s", key)
                    await resolve(options.on_fail(value, key, root))
                    return result

            value = await self._apply_transforms(
                options.transform_after + rule.transform_after, value, key, root
            )

            await self._run_hooks(options.after + rule.after, value, key, root)

        logger.debug("Running on_success hook")
        await resolve(options.on_success(root))
        return True

    async def _run_hooks(
        self,
        hooks: tuple[Callable[..., Any], ...],
        value: Any,
        key: str,
        root: Any,
    ) -> None:
        for hook in hooks:
            await resolve(hook(value, key, root))

    async def _apply_transforms(
        self,
        transforms: tuple[Callable[..., Any | Awaitable[Any]], ...],
        value: Any,
        key: str,
        root: Any,
    ) -> Any:
        """Apply transforms in order, writing each result back to root.

        Each transform receives the value written by the previous one.
        """
        if not transforms:
            return value

        logger.debug("Applying %d transform(s) to %s", len(transforms), key)
        for transform in transforms:
            set_path(root, key, await resolve(transform(value, key, root)))
            value = get_path(root, key)
        return value

    # -------------------------------------------------------------------------
    # Kind constructors
    # -------------------------------------------------------------------------

    def string(self, err: ErrorPayload = None) -> StringHandler:
        """Require the property to be a string."""
        return kinds.string(err)

    def number(self, err: ErrorPayload = None) -> NumberHandler:
        """Require the property to be a number."""
        return kinds.number(err)

    def integer(self, err: ErrorPayload = None) -> NumberHandler:
        """Require the property to be an integer."""
        return kinds.integer(err)

    def int(self, err: ErrorPayload = None) -> NumberHandler:
        """Alias for integer()."""
        return kinds.integer(err)

    def float(self, err: ErrorPayload = None) -> NumberHandler:
        """Require the property to be a float."""
        return kinds.float_(err)

    def boolean(self, err: ErrorPayload = None) -> BooleanHandler:
        return kinds.boolean(err)

    def array(self, err: ErrorPayload = None) -> ArrayHandler:
        return kinds.array(err)

    def object(self, err: ErrorPayload = None) -> ObjectHandler:
        return kinds.object_(err)

    def any(self, err: ErrorPayload = None) -> AnyHandler:
        """Require the property to be present, whatever its value."""
        return kinds.any_(err)

    # -------------------------------------------------------------------------
    # Adapters
    # -------------------------------------------------------------------------

    def connect(self, fields: Sequence[FieldRule | Mapping[str, Any]]):
        """Continuation-style (request, response, next) middleware."""
        from sluice.adapters import connect

        return connect(self, fields)

    def context(self, fields: Sequence[FieldRule | Mapping[str, Any]]):
        """Context-object (ctx, next) middleware validating ctx.req."""
        from sluice.adapters import context

        return context(self, fields)

    def resolver(self, fields: Sequence[FieldRule | Mapping[str, Any]], fn: Callable[..., Any]):
        """Wrap a (parent, args, context, info) resolver with argument validation."""
        from sluice.adapters import resolver

        return resolver(self, fields, fn)

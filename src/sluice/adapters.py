"""Adapters wrapping ValidationEngine.validate() for calling conventions.

- connect: continuation-style (request, response, next) middleware
- context: context-object (ctx, next) middleware with ctx.throw()
- resolver: (parent, args, context, info) resolver wrapper

Adapters are the only place where exceptions raised by rules, transforms
or hooks are caught; they map them to a generic server-error signal.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from sluice.engine import FieldRule, to_field_rules
from sluice.errors import BadRequestError, ServerError
from sluice.utils import resolve

if TYPE_CHECKING:
    from sluice.engine import ValidationEngine

logger = logging.getLogger(__name__)

Fields = Sequence[FieldRule | Mapping[str, Any]]


def connect(engine: ValidationEngine, fields: Fields) -> Callable[..., Any]:
    """Create a (request, response, next) middleware.

    The request itself is the root container. Calls next() on success,
    next(payload) on failure (400 when the payload is False), and next(500)
    if validation raised.

    Example:
        middleware = connect(engine, [FieldRule("body.name", string())])
        await middleware(request, response, next_fn)
    """
    rules = to_field_rules(fields)

    async def middleware(request: Any, response: Any, next: Callable[..., Any]) -> Any:
        try:
            result = await engine.validate(request, rules)
        except Exception:
            logger.exception("Validation error, calling error middleware with 500")
            return await resolve(next(500))

        if result is True:
            logger.debug("Validation success, calling next middleware")
            return await resolve(next())

        logger.info("Validation failed: %r, calling error middleware", result)
        return await resolve(next(result or 400))

    return middleware


def context(engine: ValidationEngine, fields: Fields) -> Callable[..., Any]:
    """Create a (ctx, next) middleware validating ctx.req.

    On failure calls ctx.throw(400, payload); if validation raises, calls
    ctx.throw(500, error). Whatever throw() raises propagates unchanged.
    """
    rules = to_field_rules(fields)

    async def middleware(ctx: Any, next: Callable[..., Any]) -> Any:
        try:
            result = await engine.validate(ctx.req, rules)
        except Exception as e:
            logger.exception("Validation error, throwing 500")
            return ctx.throw(500, e)

        if result is True:
            logger.debug("Validation success, calling next middleware")
            return await resolve(next())

        logger.info("Validation failed: %r, throwing 400", result)
        return ctx.throw(400, result)

    return middleware


def resolver(
    engine: ValidationEngine,
    fields: Fields,
    fn: Callable[[Any, Any, Any, Any], Any],
) -> Callable[..., Any]:
    """Wrap a (parent, args, context, info) resolver with argument validation.

    The resolver's args are the root container. Any validation failure
    raises BadRequestError without the field payload; an exception during
    validation raises ServerError.
    """
    rules = to_field_rules(fields)

    async def wrapped(parent: Any, args: Any, context: Any, info: Any) -> Any:
        try:
            result = await engine.validate(args, rules)
        except Exception as e:
            logger.exception("Validation error, raising server error")
            raise ServerError() from e

        if result is not True:
            logger.info("Validation failed: %r, raising bad request", result)
            raise BadRequestError()

        logger.debug("Validation success, calling resolver")
        return await resolve(fn(parent, args, context, info))

    return wrapped

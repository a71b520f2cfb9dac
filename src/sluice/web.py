"""FastAPI integration.

Builds a root container from a starlette Request and validates it as a
route dependency:

    check_signup = validate_request(engine, [
        FieldRule("body.email", string().matches(r"@", "Invalid email")),
        FieldRule("query.page", integer().optional().default(1)),
    ])

    @app.post("/signup")
    async def signup(payload: dict = Depends(check_signup)):
        ...
"""

import json
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from fastapi import HTTPException, Request

from sluice.engine import FieldRule, ValidationEngine, to_field_rules

logger = logging.getLogger(__name__)


async def request_to_root(request: Request) -> dict[str, Any]:
    """Build the root container for a request.

    Returns:
        {"body": parsed JSON body ({} if empty or not JSON),
         "query": query params, "path": path params, "headers": headers}
    """
    raw = await request.body()
    body: Any = {}
    if raw:
        try:
            body = json.loads(raw)
        except ValueError:
            logger.debug("Request body is not JSON, validating an empty body")

    return {
        "body": body,
        "query": dict(request.query_params),
        "path": dict(request.path_params),
        "headers": dict(request.headers),
    }


def validate_request(
    engine: ValidationEngine,
    fields: Sequence[FieldRule | Mapping[str, Any]],
) -> Callable[[Request], Any]:
    """Create a dependency that validates the request.

    Args:
        engine: The engine whose global hooks apply
        fields: Field declarations, with paths rooted at body/query/path/headers

    Returns:
        A FastAPI dependency returning the (possibly transformed) root

    Raises:
        HTTPException 400 with the failure payload as detail
        HTTPException 500 if a rule, transform or hook raised
    """
    rules = to_field_rules(fields)

    async def dependency(request: Request) -> dict[str, Any]:
        root = await request_to_root(request)
        try:
            result = await engine.validate(root, rules)
        except Exception as e:
            logger.exception("Validation error for %s", request.url.path)
            raise HTTPException(status_code=500, detail="Internal validation error") from e

        if result is not True:
            detail = result if result is not False else "Bad request"
            raise HTTPException(status_code=400, detail=detail)

        return root

    return dependency

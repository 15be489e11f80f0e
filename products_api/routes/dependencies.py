"""
Products API - Request Validation Dependency
============================================

What:  Bridges FastAPI requests to the pure rules in ``products_api.validation``.
How:   ``validate_request(rules)`` builds a dependency that decodes the JSON
       body, collects path parameters, runs the rules and raises
       ValidationError (→ 400) on any violation. Handlers receive the
       validated ``RequestData``.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Dict, Sequence

from fastapi import Request

from products_api.exceptions import ValidationError
from products_api.validation import BODY, FieldError, FieldRule, RequestData, validate

logger = logging.getLogger(__name__)


async def read_json_body(request: Request) -> Dict[str, Any]:
    """
    Decode the request body as a JSON object.

    Empty body → ``{}``; valid JSON that is not an object → ``{}``;
    malformed JSON → ValidationError with a single body error.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.info("Malformed JSON body on %s: %s", request.url.path, e)
        raise ValidationError(
            [FieldError(msg="Malformed JSON body", path="", location=BODY)],
            context={"content_length": len(raw)},
        )
    return payload if isinstance(payload, dict) else {}


def validate_request(
    rules: Sequence[FieldRule],
) -> Callable[[Request], Awaitable[RequestData]]:
    """
    Create a dependency enforcing ``rules``.

    Example:
        @router.post("/")
        async def create(data: RequestData = Depends(validate_request(CREATE_PRODUCT_RULES))):
            ...
    """

    async def dependency(request: Request) -> RequestData:
        data = RequestData(
            params=dict(request.path_params),
            body=await read_json_body(request),
        )
        errors = validate(rules, data)
        if errors:
            raise ValidationError(errors, context={"path": request.url.path})
        return data

    return dependency

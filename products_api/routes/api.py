"""
Products API - API Root and Liveness Routes
===========================================

GET /api       → {"msg": "Desde Api"}  (smoke test for JSON responses)
GET /api/ping  → "pong" as text/plain  (liveness probe, no database access)
"""

import logging

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from products_api.schemas.product import ApiMessage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])


@router.get("", response_model=ApiMessage, summary="API root message")
async def api_root() -> ApiMessage:
    return ApiMessage(msg="Desde Api")


@router.get(
    "/ping",
    response_class=PlainTextResponse,
    summary="Liveness check",
    responses={200: {"content": {"text/plain": {"example": "pong"}}}},
)
async def ping() -> str:
    logger.debug("pong")
    return "pong"

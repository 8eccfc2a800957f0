from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.adapters.ttl_store.base import AbstractTTLStore, StoreOk
from app.core.rate_limit import get_ttl_store
from app.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Liveness check.

    Does not touch the cooldown store, so it stays green while the store is
    down (plays are still served under the fail-open read policy).
    """

    return HealthResponse()


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ReadinessResponse}},
)
async def readiness_check(
    store: Annotated[AbstractTTLStore, Depends(get_ttl_store)],
) -> ReadinessResponse | JSONResponse:
    """Readiness check: 200 when the cooldown store answers a ping, else 503."""

    result = await store.ping()
    if isinstance(result, StoreOk) and result.value:
        return ReadinessResponse(status="ok", store="ok")

    body = ReadinessResponse(status="unavailable", store="unreachable")
    return JSONResponse(status_code=503, content=body.model_dump())

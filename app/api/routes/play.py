from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.rate_limit import (
    enforce_play_cooldown,
    get_client_id,
    get_cooldown_limiter,
)
from app.schemas.play import PlayResponse, PlayStatusResponse
from app.services.cooldown_limiter import CooldownLimiter

router = APIRouter(tags=["Play"])


@router.get("/play/status", response_model=PlayStatusResponse)
async def play_status(
    client_id: Annotated[str, Depends(get_client_id)],
    limiter: Annotated[CooldownLimiter, Depends(get_cooldown_limiter)],
) -> PlayStatusResponse:
    """Report whether the caller may play and how long it must wait.

    Never records a play. If the cooldown store is unreachable the caller is
    reported as able to play.

    Returns:
        PlayStatusResponse: can_play flag and remaining seconds.
    """
    seconds = await limiter.time_until_next_play(client_id)
    return PlayStatusResponse(can_play=seconds == 0, seconds_until_next_play=seconds)


@router.post(
    "/play",
    response_model=PlayResponse,
    dependencies=[Depends(enforce_play_cooldown)],
)
async def play(
    limiter: Annotated[CooldownLimiter, Depends(get_cooldown_limiter)],
) -> PlayResponse:
    """Consume the caller's play for the current cooldown window.

    The cooldown dependency has already recorded the play when this handler
    runs; refused plays never reach it (HTTP 429).

    Returns:
        PlayResponse: Confirmation with the length of the new cooldown.
    """
    return PlayResponse(allowed=True, next_play_in_seconds=limiter.cooldown_seconds)

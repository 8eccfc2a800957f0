"""Pydantic schemas for play endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PlayStatusResponse(BaseModel):
    """Read-only view of a client's cooldown."""

    can_play: bool = Field(
        ..., description="True when the client may play right now."
    )
    seconds_until_next_play: int = Field(
        ...,
        ge=0,
        description="Seconds until the client may play again (0 when it can play now).",
    )


class PlayResponse(BaseModel):
    """Response for an accepted play."""

    allowed: bool = Field(
        True, description="Always true; refused plays return HTTP 429 instead."
    )
    next_play_in_seconds: int = Field(
        ...,
        ge=0,
        description="Length of the cooldown that starts with this play, in seconds.",
    )

from __future__ import annotations

from app.api.routes.health import router as health_router
from app.api.routes.play import router as play_router

__all__ = ["health_router", "play_router"]

from __future__ import annotations

from demo_router.api.routes.demos import router as demos_router
from demo_router.api.routes.health import router as health_router

__all__ = ["demos_router", "health_router"]

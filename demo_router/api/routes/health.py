from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(tags=["Health"])

# Underscore-prefixed so it cannot shadow a project called "health".
HEALTH_PATH = "/_health"


@router.get(HEALTH_PATH)
def health_check() -> dict:
    """Liveness probe for load balancers; not rate limited.

    Returns:
        dict: ``{"status": "ok"}``.
    """

    return {"status": "ok"}

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from demo_router.services.dispatcher import RequestDispatcher

router = APIRouter(tags=["Demos"])


def get_dispatcher(request: Request) -> RequestDispatcher:
    """Return the dispatcher built by the app factory."""
    return request.app.state.dispatcher


@router.api_route(
    "/{full_path:path}",
    methods=["GET", "HEAD", "OPTIONS"],
    include_in_schema=False,
)
async def dispatch_request(
    request: Request,
    full_path: str,
    dispatcher: Annotated[RequestDispatcher, Depends(get_dispatcher)],
) -> Response:
    """Catch-all entry point: listing, text files, API placeholder and project assets.

    Routing happens in ``RequestDispatcher`` so that path normalization,
    CORS preflight and rate limiting apply uniformly to every path.
    """
    return await dispatcher.dispatch(request)

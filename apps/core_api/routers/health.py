"""
Health Check Endpoint.

- GET /healthz: Liveness probe (API running, catalogue size)
"""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/healthz")
async def healthz(request: Request):
    """
    Liveness probe - is the API process running?

    Returns 200 OK if server is alive.
    """
    dispatcher = getattr(request.app.state, "dispatcher", None)
    return {
        "status": "healthy",
        "service": "git-for-me-dear-ai",
        "tools": len(dispatcher.registry) if dispatcher is not None else 0,
    }

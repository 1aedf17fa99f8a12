"""
FastAPI Dependency Injection.

Provides the tool dispatcher and settings held on the application state.
"""

from fastapi import HTTPException, Request

from gitai_config.settings import Settings
from gitai_tools.dispatcher import ToolDispatcher


def get_dispatcher(request: Request) -> ToolDispatcher:
    """
    Dependency: the application's tool dispatcher.

    Example Usage:
        @router.get("/tools")
        async def list_tools(dispatcher: ToolDispatcher = Depends(get_dispatcher)):
            return dispatcher.list_tools()
    """
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise HTTPException(status_code=503, detail="Tool catalogue is not ready")
    return dispatcher


def get_settings(request: Request) -> Settings:
    return request.app.state.settings

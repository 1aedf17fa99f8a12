"""
/tools Router - Tool Catalogue and Invocation.

- GET /tools: every registered tool with its input schema
- GET /tools/{name}: one tool
- POST /tools/{name}: call a tool; the JSON body holds its arguments

A tool that ran returns 200 whatever its ``success`` flag; dispatch errors are
mapped onto 404/422/500 by the application's exception handlers.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from apps.core_api.deps import get_dispatcher
from gitai_obs.logging import get_logger
from gitai_tools.dispatcher import ToolDispatcher
from gitai_tools.exceptions import ToolNotFoundError
from gitai_tools.registry import describe_tool

router = APIRouter()
logger = get_logger(__name__)


@router.get("")
async def list_tools(dispatcher: ToolDispatcher = Depends(get_dispatcher)):
    tools = dispatcher.list_tools()
    return {"tools": tools, "count": len(tools)}


@router.get("/{name}")
async def get_tool(name: str, dispatcher: ToolDispatcher = Depends(get_dispatcher)):
    tool = dispatcher.registry.get(name)
    if tool is None:
        raise ToolNotFoundError(f"Tool '{name}' not found", tool_name=name)
    return describe_tool(tool)


@router.post("/{name}")
async def call_tool(
    name: str,
    arguments: dict[str, Any] | None = Body(default=None),
    dispatcher: ToolDispatcher = Depends(get_dispatcher),
):
    response = await dispatcher.dispatch(name, arguments or {})
    logger.info("api_tool_called", tool=name, success=response.success)
    return response.to_dict()

"""HTTP API tests."""

import pytest
from fastapi.testclient import TestClient
from pydantic import Field

from apps.core_api.main import create_app
from gitai_tools.base import BaseTool, ToolInput, ToolResult
from gitai_tools.dispatcher import ToolDispatcher
from gitai_tools.exceptions import PreconditionError
from gitai_tools.registry import ToolRegistry


class GreetInput(ToolInput):
    name: str = Field(..., min_length=1)
    shout: bool = False


class GreetTool(BaseTool):
    name = "greet"
    description = "Say hello"
    input_model = GreetInput
    failure_message = "Could not greet {name}"

    async def run(self, ctx, args):
        if args.name == "nobody":
            raise PreconditionError("nobody is there")
        greeting = f"Hello, {args.name}"
        return ToolResult.ok(greeting.upper() if args.shout else greeting)


class ExplodingTool(BaseTool):
    name = "explode"
    description = "Raises"

    async def run(self, ctx, args):
        raise RuntimeError("kaboom")


@pytest.fixture
def client(ctx, settings):
    registry = ToolRegistry()
    registry.register_all([GreetTool(), ExplodingTool()])
    app = create_app(dispatcher=ToolDispatcher(registry, ctx), settings=settings)
    with TestClient(app) as test_client:
        yield test_client


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["endpoints"]["call"] == "POST /tools/{name}"


def test_healthz_reports_catalogue_size(client):
    response = client.get("/healthz")
    assert response.json() == {"status": "healthy", "service": "git-for-me-dear-ai", "tools": 2}


def test_list_tools(client):
    body = client.get("/tools").json()

    assert body["count"] == 2
    greet = body["tools"][0]
    assert greet["name"] == "greet"
    assert greet["inputSchema"]["required"] == ["name"]


def test_describe_tool(client):
    assert client.get("/tools/greet").json()["description"] == "Say hello"


def test_describe_unknown_tool(client):
    response = client.get("/tools/missing")
    assert response.status_code == 404
    assert response.json() == {"error": "NOT_FOUND", "message": "Tool 'missing' not found"}


def test_call_tool(client):
    response = client.post("/tools/greet", json={"name": "Ada", "shout": True})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "HELLO, ADA",
        "data": None,
        "error": None,
        "text": "✅ HELLO, ADA",
    }
    assert "X-Request-ID" in response.headers


def test_failed_result_is_still_200(client):
    response = client.post("/tools/greet", json={"name": "nobody"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Could not greet nobody"
    assert body["error"] == "nobody is there"


def test_invalid_arguments(client):
    response = client.post("/tools/greet", json={})

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "INVALID_PARAMS"
    assert body["details"][0]["loc"] == "name"
    assert body["details"][0]["type"] == "missing"


def test_unknown_tool_call(client):
    assert client.post("/tools/nope", json={}).status_code == 404


def test_crashing_tool(client):
    response = client.post("/tools/explode")

    assert response.status_code == 500
    assert response.json() == {"error": "INTERNAL_ERROR", "message": "Tool execution failed: kaboom"}


def test_request_id_is_echoed(client):
    response = client.get("/healthz", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_metrics(client):
    client.post("/tools/greet", json={"name": "Ada"})
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "tool_executions_total" in response.text

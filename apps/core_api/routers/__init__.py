"""
FastAPI Routers.

Contains:
- tools: GET /tools, GET /tools/{name}, POST /tools/{name}
- health: GET /healthz
- metrics: GET /metrics
"""

__all__ = ["tools", "health", "metrics"]

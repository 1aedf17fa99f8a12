"""
git-for-me-dear-ai FastAPI Application.

API server providing:
- /tools: list, describe and call tools
- /healthz: liveness
- /metrics: Prometheus metrics
"""

from apps.core_api.main import create_app

__all__ = ["create_app"]

"""
Prometheus Metrics Endpoint.

Exposes /metrics for Prometheus scraping.
"""

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics():
    """
    Prometheus metrics endpoint.

    Exposes the counters and histograms from ``gitai_obs.metrics``:

    ```
    # HELP tool_executions_total Total tool executions
    # TYPE tool_executions_total counter
    tool_executions_total{status="success",tool_name="git_status"} 15.0
    ```
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

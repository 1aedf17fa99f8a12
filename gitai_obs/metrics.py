"""
Prometheus Metrics Registration.

Served by the HTTP API at /metrics.
"""

from prometheus_client import Counter, Gauge, Histogram

# ============================================================================
# COUNTERS
# ============================================================================

tool_executions_total = Counter(
    "tool_executions_total",
    "Total tool executions",
    ["tool_name", "status"],  # success, failure, not_found, invalid_arguments, error
)

external_commands_total = Counter(
    "external_commands_total",
    "External processes spawned",
    ["binary", "status"],  # ok, failed, not_found, timeout
)

# ============================================================================
# GAUGES
# ============================================================================

registry_tools_registered = Gauge(
    "registry_tools_registered", "Tools currently registered"
)

# ============================================================================
# HISTOGRAMS
# ============================================================================

tool_execution_duration = Histogram(
    "tool_execution_duration_seconds",
    "Tool execution duration",
    ["tool_name"],
    buckets=(0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 120.0),
)

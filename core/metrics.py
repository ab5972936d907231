"""
Prometheus metrics for the storefront service.

Custom metrics for remote calls, activity logging and realtime refetches.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Remote service metrics
remote_calls_total = Counter(
    "remote_calls_total",
    "Total calls to the remote table service",
    ["operation", "table", "outcome"],
)

remote_call_duration_seconds = Histogram(
    "remote_call_duration_seconds",
    "Remote table service call duration in seconds",
    ["operation", "table"],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

realtime_refetches_total = Counter(
    "realtime_refetches_total",
    "Full refetches triggered by change notifications",
    ["table"],
)

# Activity log metrics
audit_entries_total = Counter(
    "audit_entries_total",
    "Activity log entries by outcome (written, skipped, error)",
    ["action", "outcome"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)

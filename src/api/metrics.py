import time

from prometheus_client import Counter, Histogram, REGISTRY


# we check if they are already registered to avoid errors during hot reloads or test runs
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        # already registered, retrieve it from the registry
        return REGISTRY._names_to_collectors[name]


REQUESTS_TOTAL = get_or_create_metric(
    "planner_requests_total",
    "Total requests",
    Counter,
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = get_or_create_metric(
    "planner_request_latency_seconds",
    "Request latency",
    Histogram,
    labelnames=["endpoint"],
)

SESSIONS_SCHEDULED_TOTAL = get_or_create_metric(
    "planner_sessions_scheduled_total",
    "Total sessions placed by the day planner",
    Counter,
    labelnames=["type"],
)

SCHEDULE_EFFICIENCY = get_or_create_metric(
    "planner_schedule_efficiency",
    "Study share of generated schedules",
    Histogram,
    buckets=(0.1, 0.25, 0.5, 0.6, 0.7, 0.75, 0.8, 0.9, 1.0),
)

XP_AWARDED_TOTAL = get_or_create_metric(
    "planner_xp_awarded_total", "Total XP awarded to users", Counter
)


def observe_request(endpoint: str, status: str, started: float) -> None:
    """Record one request (best-effort)."""
    try:
        REQUESTS_TOTAL.labels(endpoint=endpoint, status=status).inc()
        REQUEST_LATENCY_SECONDS.labels(endpoint=endpoint).observe(time.time() - started)
    except Exception:
        pass

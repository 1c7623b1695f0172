"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Auth metrics
auth_events = Counter(
    'auth_events_total',
    'Signup and login attempts',
    ['event', 'result']  # signup/login, success/<error code>
)

# Experience lifecycle metrics
experience_transitions = Counter(
    'experience_transitions_total',
    'Experience status changes',
    ['status']  # draft, published, blocked
)

# Booking metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking attempts',
    ['result']  # success, not_found, invalid_status, forbidden, duplicate
)

# HTTP metrics
request_latency = Histogram(
    'http_request_latency_seconds',
    'Request latency by method and status class',
    ['method', 'status_class'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)


def metrics_endpoint() -> Response:
    """Render every registered metric in the Prometheus text format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_auth_event(event: str, result: str):
    """Record a signup/login attempt. Result: success or the error code."""
    auth_events.labels(event=event, result=result.lower()).inc()


def record_experience_transition(status: str):
    experience_transitions.labels(status=status).inc()


def record_booking_attempt(result: str):
    """Record booking attempt. Result: success or the lowercase error code."""
    booking_attempts.labels(result=result.lower()).inc()


def observe_request(method: str, status_code: int, duration_seconds: float):
    request_latency.labels(method=method, status_class=f"{status_code // 100}xx").observe(duration_seconds)

"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'eventbook_booking_attempts_total',
    'Total booking attempts',
    ['status']  # success, rejected, conflict, error
)

booking_latency = Histogram(
    'eventbook_booking_latency_seconds',
    'Booking request latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

# Admission check outcomes
admission_decisions = Counter(
    'eventbook_admission_decisions_total',
    'Admission check decisions',
    ['result']  # admit, not_authenticated, sold_out, already_booked
)

# Cancellations
booking_cancellations = Counter(
    'eventbook_booking_cancellations_total',
    'Bookings cancelled by attendees'
)

# Cache metrics
cache_operations = Counter(
    'eventbook_cache_operations_total',
    'Listing cache operations',
    ['operation', 'result']  # get/set/invalidate, hit/miss/ok/error
)

# Catalog store
store_write_failures = Counter(
    'eventbook_store_write_failures_total',
    'Failed writes against the catalog store',
    ['entity']
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


# Convenience functions for instrumentation
def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, rejected, conflict, error"""
    booking_attempts.labels(status=status).inc()


def record_admission(result: str):
    """Record an admission check decision by its outcome name."""
    admission_decisions.labels(result=result).inc()


def record_cache_operation(operation: str, result: str):
    cache_operations.labels(operation=operation, result=result).inc()


def record_store_write_failure(entity: str):
    store_write_failures.labels(entity=entity).inc()

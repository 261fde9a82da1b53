"""
Prometheus metrics for the PayPal integration.

Counts checkout hand-offs and IPN outcomes, and exposes everything in
Prometheus format at /metrics.
"""

from prometheus_fastapi_instrumentator import Instrumentator
from prometheus_client import Counter

purchases_initiated = Counter(
    "paypal_purchases_initiated_total",
    "Total number of purchases handed off to PayPal checkout",
)

ipn_notifications = Counter(
    "paypal_ipn_notifications_total",
    "Total number of processed IPN notifications",
    ["outcome"],  # completed, rejected, malformed
)


def init_metrics(app):
    """
    Initialize Prometheus metrics instrumentation for the FastAPI app.

    Args:
        app: FastAPI application instance

    Returns:
        Instrumentator instance
    """
    inst = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
    )
    inst.instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)
    return inst

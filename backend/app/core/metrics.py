# Centralized Prometheus metrics for the storefront API. Middleware
# below records timing and counts for every request, and the checkout
# workflow bumps its own counters so partial failures show up on
# dashboards even though the order itself succeeded.

from time import monotonic

from fastapi import Request
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware


# Generic API latency + request counters. We label by method and
# endpoint so we can see hot paths and slow ones at a glance.
REQUEST_LATENCY = Histogram(
    "api_request_latency_seconds",
    "Latency of API requests in seconds",
    ["method", "endpoint"],
)
REQUEST_COUNT = Counter(
    "api_request_count_total",
    "Total API requests",
    ["method", "endpoint", "http_status"],
)

# outcome: placed|rejected|items_failed
CHECKOUT_ORDERS_TOTAL = Counter(
    "checkout_orders_total",
    "Checkout attempts grouped by outcome",
    ["outcome"],
)

# Non-fatal steps that failed after the order header was written.
# step: shipment|commission|affiliate_order|affiliate_totals|loyalty
CHECKOUT_STEP_FAILURES_TOTAL = Counter(
    "checkout_step_failures_total",
    "Checkout steps that failed without failing the order",
    ["step"],
)

AFFILIATE_COMMISSIONS_TOTAL = Counter(
    "affiliate_commissions_total",
    "Orders that earned an affiliate commission, by attribution source",
    ["source"],
)


def _label(value: object | None, default: str = "unknown") -> str:
    if value is None:
        return default
    if isinstance(value, str) and not value.strip():
        return default
    return str(value)


def record_checkout_outcome(outcome: str) -> None:
    CHECKOUT_ORDERS_TOTAL.labels(outcome=_label(outcome)).inc()


def record_step_failure(step: str) -> None:
    CHECKOUT_STEP_FAILURES_TOTAL.labels(step=_label(step)).inc()


def record_commission(source: str | None) -> None:
    AFFILIATE_COMMISSIONS_TOTAL.labels(source=_label(source, "none")).inc()


class MetricsMiddleware(BaseHTTPMiddleware):
    # Wraps every request to capture latency and a labeled count.
    async def dispatch(self, request: Request, call_next):
        start = monotonic()
        response = await call_next(request)
        duration = monotonic() - start

        route = request.scope.get("route")
        route_path = getattr(route, "path", None) or request.url.path
        REQUEST_LATENCY.labels(request.method, route_path).observe(duration)
        REQUEST_COUNT.labels(request.method, route_path, response.status_code).inc()
        return response

"""Prometheus metrics for the gateway."""

from prometheus_client import Counter, Gauge

cors_decisions_total = Counter(
    "cors_decisions_total",
    "Origin policy decisions taken at the CORS gate",
    ["decision"],
)

request_contexts_total = Counter(
    "request_contexts_total",
    "Total GraphQL request contexts built",
)

gateway_state = Gauge(
    "gateway_state",
    "Lifecycle state index (0=unstarted, 1=starting, 2=listening, 3=draining, 4=stopped)",
)

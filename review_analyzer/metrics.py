from prometheus_client import Counter, Histogram


REQUESTS = Counter("review_analyzer_requests_total", "Total API requests", ["endpoint"])
LATENCY = Histogram(
    "review_analyzer_request_latency_seconds",
    "Request latency",
    buckets=(0.05, 0.1, 0.2, 0.5, 1, 2, 5, 10, 30)
)
VERDICTS = Counter(
    "review_analyzer_verdicts_total",
    "Verdicts delivered to the result sink",
    ["kind", "verdict", "category"],
)
ENDPOINT_FALLBACKS = Counter(
    "review_analyzer_endpoint_fallbacks_total",
    "Requests moved to the next endpoint after a rate limit",
)
HEURISTIC_FALLBACKS = Counter(
    "review_analyzer_heuristic_fallbacks_total",
    "Noun-density verdicts produced by the offline heuristic",
)

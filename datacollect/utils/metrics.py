"""
Prometheus metrics for datacollect.

Provides instrumentation for monitoring collection health and politeness.
"""

from prometheus_client import Counter, Histogram

# =============================================================================
# Fetch Metrics
# =============================================================================

FETCH_TOTAL = Counter(
    "datacollect_fetch_total",
    "Total number of fetch operations",
    ["status", "domain"],
)

FETCH_DURATION = Histogram(
    "datacollect_fetch_duration_seconds",
    "Fetch operation duration",
    ["domain"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

FETCH_STATUS_CODES = Counter(
    "datacollect_fetch_status_code_total",
    "HTTP status codes received",
    ["status_code", "domain"],
)

RATE_LIMIT_DELAY = Histogram(
    "datacollect_rate_limit_delay_seconds",
    "Time spent waiting for a request slot",
    ["domain"],
    buckets=[0.0, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# =============================================================================
# Extraction Metrics
# =============================================================================

FIELD_EXTRACTIONS = Counter(
    "datacollect_field_extraction_total",
    "Per-field extraction outcomes",
    ["source", "field", "status"],
)

# =============================================================================
# Search Metrics
# =============================================================================

SEARCH_PAGES = Counter(
    "datacollect_search_pages_total",
    "Search listing pages fetched",
    ["source"],
)

SEARCH_RECORDS = Counter(
    "datacollect_search_records_total",
    "Records emitted by search streams",
    ["source", "sponsored"],
)

# =============================================================================
# Error Metrics
# =============================================================================

ERRORS = Counter(
    "datacollect_errors_total",
    "Errors by type",
    ["error_type", "domain"],
)


# =============================================================================
# Helper Functions
# =============================================================================


def record_fetch(
    domain: str,
    status: str,
    duration_seconds: float,
    status_code: int | None = None,
) -> None:
    """Record metrics for a fetch operation."""
    FETCH_TOTAL.labels(status=status, domain=domain).inc()
    FETCH_DURATION.labels(domain=domain).observe(duration_seconds)
    if status_code:
        FETCH_STATUS_CODES.labels(
            status_code=str(status_code), domain=domain
        ).inc()


def record_wait(domain: str, delay_seconds: float) -> None:
    """Record time spent waiting on the rate limiter."""
    RATE_LIMIT_DELAY.labels(domain=domain).observe(delay_seconds)


def record_field(source: str, field: str, found: bool) -> None:
    """Record whether a record field was extracted."""
    status = "found" if found else "missing"
    FIELD_EXTRACTIONS.labels(source=source, field=field, status=status).inc()


def record_search_page(source: str) -> None:
    """Record a fetched listing page."""
    SEARCH_PAGES.labels(source=source).inc()


def record_search_record(source: str, sponsored: bool | None) -> None:
    """Record a record emitted by a search stream."""
    SEARCH_RECORDS.labels(source=source, sponsored=str(bool(sponsored)).lower()).inc()


def record_error(
    domain: str,
    error_type: str,
) -> None:
    """Record an error."""
    ERRORS.labels(error_type=error_type, domain=domain).inc()

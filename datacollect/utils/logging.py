"""
Structured logging for datacollect.

Provides JSON-formatted logging with context propagation.
"""

import logging
import sys
from typing import Any

import structlog


def setup_logging(
    level: str = "INFO",
    format_type: str = "json",
    log_file: str | None = None,
) -> None:
    """
    Configure structured logging.

    Logs go to stderr so that record output on stdout stays machine readable.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_type: Output format ('json' or 'console').
        log_file: Optional file path to write logs to.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=handlers,
        force=True,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format_type == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        A bound structured logger.
    """
    return structlog.get_logger(name)


class DatacollectLogger:
    """
    Logger for collection operations with pre-defined event types.
    """

    def __init__(self, name: str = "datacollect"):
        self._logger = get_logger(name)
        self._context: dict[str, Any] = {}

    def bind(self, **kwargs: Any) -> "DatacollectLogger":
        """Bind context to all subsequent log calls."""
        new_logger = DatacollectLogger.__new__(DatacollectLogger)
        new_logger._logger = self._logger.bind(**kwargs)
        new_logger._context = {**self._context, **kwargs}
        return new_logger

    def fetch_start(self, url: str, **kwargs: Any) -> None:
        """Log the start of a fetch operation."""
        self._logger.debug(
            "fetch_start",
            event_type="fetch",
            url=url,
            **kwargs,
        )

    def fetch_success(
        self,
        url: str,
        status_code: int,
        duration_ms: float,
        content_length: int,
        **kwargs: Any,
    ) -> None:
        """Log a successful fetch."""
        self._logger.info(
            "fetch_success",
            event_type="fetch",
            url=url,
            status_code=status_code,
            duration_ms=round(duration_ms, 1),
            content_length=content_length,
            **kwargs,
        )

    def fetch_error(
        self,
        url: str,
        error: str,
        error_type: str,
        **kwargs: Any,
    ) -> None:
        """Log a fetch error."""
        self._logger.error(
            "fetch_error",
            event_type="fetch",
            url=url,
            error=error,
            error_type=error_type,
            **kwargs,
        )

    def rate_limit_wait(
        self,
        domain: str,
        delay_seconds: float,
        reason: str,
        **kwargs: Any,
    ) -> None:
        """Log rate limit waiting."""
        self._logger.debug(
            "rate_limit_wait",
            event_type="compliance",
            domain=domain,
            delay_seconds=round(delay_seconds, 3),
            reason=reason,
            **kwargs,
        )

    def listing_parsed(
        self,
        query: str,
        page: int,
        result_count: int,
        sponsored_count: int,
        **kwargs: Any,
    ) -> None:
        """Log a parsed search listing page."""
        self._logger.info(
            "listing_parsed",
            event_type="search",
            query=query,
            page=page,
            result_count=result_count,
            sponsored_count=sponsored_count,
            **kwargs,
        )

    def field_missing(
        self,
        url: str,
        field: str,
        reason: str,
        **kwargs: Any,
    ) -> None:
        """Log an optional field that could not be extracted."""
        self._logger.debug(
            "field_missing",
            event_type="extraction",
            url=url,
            field=field,
            reason=reason,
            **kwargs,
        )

    def extraction_result(
        self,
        url: str,
        success: bool,
        fields_extracted: list[str],
        **kwargs: Any,
    ) -> None:
        """Log extraction result."""
        level = "info" if success else "warning"
        getattr(self._logger, level)(
            "extraction_result",
            event_type="extraction",
            url=url,
            success=success,
            fields_extracted=fields_extracted,
            **kwargs,
        )

    def search_progress(
        self,
        query: str,
        page: int,
        records_emitted: int,
        detail_failures: int,
        **kwargs: Any,
    ) -> None:
        """Log search progress after a page completes."""
        self._logger.info(
            "search_progress",
            event_type="progress",
            query=query,
            page=page,
            records_emitted=records_emitted,
            detail_failures=detail_failures,
            **kwargs,
        )

    def search_finished(
        self,
        query: str,
        pages: int,
        records_emitted: int,
        reason: str,
        **kwargs: Any,
    ) -> None:
        """Log the end of a search stream."""
        self._logger.info(
            "search_finished",
            event_type="progress",
            query=query,
            pages=pages,
            records_emitted=records_emitted,
            reason=reason,
            **kwargs,
        )

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        self._logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        self._logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        self._logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""
        self._logger.error(message, **kwargs)

"""Structured logging for REST request execution."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def log_request_sent(*, method: str, path: str, attempt: int, auth_type: str) -> None:
    logger.debug(
        "request_sent",
        extra={"method": method, "path": path, "attempt": attempt, "auth_type": auth_type},
    )


def log_request_completed(
    *, method: str, path: str, status: int, attempt: int, latency_ms: float
) -> None:
    logger.debug(
        "request_completed",
        extra={
            "method": method,
            "path": path,
            "status": status,
            "attempt": attempt,
            "latency_ms": latency_ms,
        },
    )


def log_retry_scheduled(
    *, method: str, path: str, attempt: int, delay: float, reason: str
) -> None:
    """Log a retry about to be attempted after ``delay`` seconds.

    Args:
        method: HTTP method
        path: Request path
        attempt: 1-based number of the upcoming retry
        delay: Backoff delay in seconds
        reason: Why the previous attempt failed
    """
    logger.info(
        "request_retry_scheduled",
        extra={
            "method": method,
            "path": path,
            "attempt": attempt,
            "delay": delay,
            "reason": reason,
        },
    )


def log_request_aborted(*, method: str, path: str, reason: str) -> None:
    logger.warning(
        "request_aborted",
        extra={"method": method, "path": path, "reason": reason},
    )


def log_request_failed(
    *, method: str, path: str, error_type: str, error_message: str, status: int | None = None
) -> None:
    logger.error(
        "request_failed",
        extra={
            "method": method,
            "path": path,
            "status": status,
            "error_type": error_type,
            "error_message": error_message,
        },
    )

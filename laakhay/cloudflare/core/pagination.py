"""Pagination consistency checks for paginated listings."""

from __future__ import annotations

from ..models.envelope import ResultInfo


def check_result_info(per_page: int, page: int, count: int, info: ResultInfo) -> bool:
    """Check that a page's ``result_info`` agrees with the request and itself.

    Args:
        per_page: Page size the caller requested
        page: Page number the caller requested (1-based)
        count: Number of items actually present in ``result``
        info: Pagination block reported by the API

    Returns:
        True if the page is internally consistent, False otherwise. Never raises.
    """
    if info.per_page != per_page or info.page != page or info.count != count:
        return False

    # Empty collection: no pages and nothing returned
    if info.total == 0:
        return info.total_pages == 0 and info.count == 0

    if info.total_pages < 1 or info.per_page < 0:
        return False
    if not 1 <= info.page <= info.total_pages:
        return False

    # No phantom trailing page and no missing one
    if info.per_page > 0 and info.total_pages != -(-info.total // info.per_page):
        return False

    if info.page < info.total_pages:
        return info.count == info.per_page
    return info.count == info.total - info.per_page * (info.total_pages - 1)

"""
Pagination helpers shared by the proxy and the UI.

The backend may send an explicit list of page numbers to show; when it does
not, get_page_numbers() builds a window of up to five pages around the
current one.
"""

from typing import Any, Dict, List, Optional

PAGE_WINDOW = 5


def get_page_numbers(page: int, pages: int, window: int = PAGE_WINDOW) -> List[int]:
    """
    Page numbers to display for the given position.

    Examples:
        >>> get_page_numbers(1, 3)
        [1, 2, 3]
        >>> get_page_numbers(2, 10)
        [1, 2, 3, 4, 5]
        >>> get_page_numbers(9, 10)
        [6, 7, 8, 9, 10]
        >>> get_page_numbers(6, 10)
        [4, 5, 6, 7, 8]
    """
    if pages <= 0:
        return []
    if pages <= window:
        return list(range(1, pages + 1))

    half = window // 2
    if page <= half + 1:
        return list(range(1, window + 1))
    if page >= pages - half:
        return list(range(pages - window + 1, pages + 1))
    return list(range(page - half, page + half + 1))


def page_numbers_for(pagination: Optional[Dict[str, Any]]) -> List[int]:
    """Prefer backend-provided page_numbers, otherwise compute the window."""
    if not pagination:
        return []

    provided = pagination.get("page_numbers")
    if provided:
        return list(provided)

    return get_page_numbers(int(pagination.get("page") or 1), int(pagination.get("pages") or 0))


def build_pagination(page: int, page_size: int, total: int) -> Dict[str, Any]:
    """Build a pagination block in the backend's format."""
    pages = (total + page_size - 1) // page_size if page_size > 0 else 0
    return {
        "page": page,
        "pages": pages,
        "total": total,
        "page_size": page_size,
        "has_next": page < pages,
        "has_prev": page > 1,
        "page_numbers": get_page_numbers(page, pages),
    }


def pagination_state(current_page: int, total_pages: int) -> Dict[str, bool]:
    """
    Enabled flags for the first/previous/next/last controls.

    Backwards controls are disabled on page 1, forward controls on the last page.
    """
    return {
        "first": current_page > 1,
        "prev": current_page > 1,
        "next": current_page < total_pages,
        "last": current_page < total_pages,
    }

"""Page/limit normalization and the pagination envelope shared by list endpoints."""
import math


def _to_int(value, default):
    if value is None or value == '':
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def normalize_page(page):
    """Page number floors at 1"""
    return max(_to_int(page, 1), 1)


def normalize_limit(limit, default, minimum, maximum):
    """
    Missing, unreadable or zero limits fall back to default, then the result
    is clamped to [minimum, maximum].
    """
    value = _to_int(limit, default) or default
    return min(max(value, minimum), maximum)


def build_pagination(page, limit, total_items):
    total_pages = math.ceil(total_items / limit) if limit else 0
    return {
        'currentPage': page,
        'totalPages': total_pages,
        'totalItems': total_items,
        'itemsPerPage': limit,
        'hasNextPage': page < total_pages,
        'hasPrevPage': page > 1,
    }


def page_offset(page, limit):
    return (page - 1) * limit

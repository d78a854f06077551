"""
Pagination Calculator
======================
Pure navigation metadata for 1-based pages, shared by the discovery feed
(which applies its own offset/limit) and DRF list endpoints.
"""

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from apps.common.exceptions import ValidationError


def paginate(page_size, page, total_items):
    """
    Build navigation metadata for one page.

    Args:
        page_size: Items per page, must be positive
        page: 1-based page number, must be positive
        total_items: Total matching rows (from a count query)

    Returns:
        dict: has_next, has_previous, page_count, page_size, page, total_items
    """
    if page_size is None or page_size <= 0:
        raise ValidationError('Page size must be a positive integer.')
    if page is None or page <= 0:
        raise ValidationError('Page must be a positive integer.')

    return {
        'has_next': page * page_size < total_items,
        'has_previous': page > 1,
        'page_count': (total_items + page_size - 1) // page_size,
        'page_size': page_size,
        'page': page,
        'total_items': total_items,
    }


def page_bounds(page, page_size):
    """
    Offset and limit for a 1-based page.
    """
    if page_size is None or page_size <= 0:
        raise ValidationError('Page size must be a positive integer.')
    if page is None or page <= 0:
        raise ValidationError('Page must be a positive integer.')
    return (page - 1) * page_size, page_size


class StandardResultsSetPagination(PageNumberPagination):
    """
    DRF pagination rendering the same envelope as the discovery feed.
    """
    page_size = 10
    page_size_query_param = 'size'
    max_page_size = 100

    def get_paginated_response(self, data):
        paginator = self.page.paginator
        return Response({
            'pagination': paginate(paginator.per_page, self.page.number, paginator.count),
            'content': data,
        })

"""
Pagination shared by every API viewset.
"""

from rest_framework.pagination import PageNumberPagination


class StandardPagination(PageNumberPagination):
    """
    Page number pagination that honours ?page_size=X.

    Usage:
        GET /api/v1/properties/               → 20 results (default)
        GET /api/v1/properties/?page_size=100 → 100 results
    """
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 500

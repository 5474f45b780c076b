"""Default page-number pagination for list endpoints."""

from __future__ import annotations

from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """Page size comes from ``REST_FRAMEWORK['PAGE_SIZE']``.

    Clients may request a different size with ``?page_size=`` up to
    ``max_page_size``.
    """

    page_size_query_param = "page_size"
    max_page_size = 100

"""Page-number pagination answering with {recipes, pagination}."""

import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from .constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, PAGE_SIZE_QUERY_PARAM


class RecipePagination(PageNumberPagination):
    """Paginator driven by the `page` and `limit` query parameters."""

    page_size = DEFAULT_PAGE_SIZE
    page_size_query_param = PAGE_SIZE_QUERY_PARAM
    max_page_size = MAX_PAGE_SIZE
    results_key = "recipes"

    def paginate_queryset(self, queryset, request, view=None):
        self.limit = self.get_page_size(request)
        self.total = queryset.count()
        self.current = self._page_number(request)
        start = (self.current - 1) * self.limit
        return list(queryset[start:start + self.limit])

    def _page_number(self, request) -> int:
        try:
            number = int(request.query_params.get(self.page_query_param, 1))
        except (TypeError, ValueError):
            return 1
        return max(number, 1)

    def get_paginated_response(self, data):
        return Response(
            {
                self.results_key: data,
                "pagination": {
                    "page": self.current,
                    "limit": self.limit,
                    "total": self.total,
                    "pages": math.ceil(self.total / self.limit),
                },
            }
        )

# core/pagination.py

from __future__ import annotations

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class RecordsPagination(PageNumberPagination):
    """
    page / limit paginator used by every list endpoint.

    Response shape: {"records": [...], "total": n, "page": p, "limit": l}
    """

    page_size = 20
    page_query_param = "page"
    page_size_query_param = "limit"
    max_page_size = 200

    def get_paginated_response(self, data):
        return Response(
            {
                "records": data,
                "total": self.page.paginator.count,
                "page": self.page.number,
                "limit": self.get_page_size(self.request),
            }
        )

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "records": schema,
                "total": {"type": "integer"},
                "page": {"type": "integer"},
                "limit": {"type": "integer"},
            },
        }

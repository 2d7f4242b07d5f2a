# shared/common/pagination.py
"""
Page-number pagination in the ledger list envelope.
"""

from typing import Any, Dict
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from .constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


class StandardPagination(PageNumberPagination):
    page_size = DEFAULT_PAGE_SIZE
    page_size_query_param = 'page_size'
    max_page_size = MAX_PAGE_SIZE

    def get_paginated_response(self, data: Any) -> Response:
        paginator = self.page.paginator
        return Response({
            'success': True,
            'count': paginator.count,
            'page': self.page.number,
            'pages': paginator.num_pages,
            'next': self.get_next_link(),
            'previous': self.get_previous_link(),
            'results': data,
        })

    def get_paginated_response_schema(self, schema: Dict) -> Dict:
        return {
            'type': 'object',
            'required': ['success', 'count', 'results'],
            'properties': {
                'success': {'type': 'boolean', 'example': True},
                'count': {'type': 'integer', 'example': 42},
                'page': {'type': 'integer', 'example': 1},
                'pages': {'type': 'integer', 'example': 3},
                'next': {'type': 'string', 'format': 'uri', 'nullable': True},
                'previous': {'type': 'string', 'format': 'uri', 'nullable': True},
                'results': schema,
            },
        }

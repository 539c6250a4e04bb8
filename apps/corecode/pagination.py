from rest_framework.pagination import LimitOffsetPagination
from rest_framework.response import Response


class LimitOffsetEnvelope(LimitOffsetPagination):
    """
    ``?limit=&offset=`` paging that wraps rows as
    ``{<results_key>: [...], "pagination": {total, limit, offset, pages}}``.
    Views set ``results_key`` ("clients", "vouchers", …).
    """
    default_limit = 20
    max_limit = 200
    results_key = "results"

    def get_paginated_response(self, data):
        total = self.count
        limit = self.limit or total or 1
        return Response({
            self.results_key: data,
            "pagination": {
                "total": total,
                "limit": self.limit,
                "offset": self.offset,
                "pages": -(-total // limit) if total else 0,
            },
        })


def envelope(key: str) -> type[LimitOffsetEnvelope]:
    """Return a pagination class emitting rows under *key*."""
    return type(f"{key.title()}Pagination", (LimitOffsetEnvelope,), {"results_key": key})

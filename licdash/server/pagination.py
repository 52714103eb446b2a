"""
Pagination parameter parsing for paged collections.
"""

from __future__ import annotations

from fastapi import Request

from licdash.common.models import PaginationRequest


class PaginationResolver:
    """FastAPI dependency turning ``page``/``per_page`` into a PaginationRequest.

    Missing, unparsable or non-positive values fall back to the defaults and
    ``per_page`` is capped at ``max_per_page``; this never fails a request.
    """

    def __init__(
        self, default_page: int = 1, default_per_page: int = 20, max_per_page: int = 100
    ):
        self.default_page = default_page
        self.default_per_page = default_per_page
        self.max_per_page = max_per_page

    def __call__(self, request: Request) -> PaginationRequest:
        params = request.query_params
        per_page_raw = params.get("per_page")
        if per_page_raw is None:
            per_page_raw = params.get("perPage")
        pagination = self.resolve(params.get("page"), per_page_raw)
        request.state.pagination = pagination
        return pagination

    def resolve(self, page: str | None, per_page: str | None) -> PaginationRequest:
        return PaginationRequest(
            page=self._positive_int(page, self.default_page),
            per_page=min(
                self._positive_int(per_page, self.default_per_page), self.max_per_page
            ),
        )

    @staticmethod
    def _positive_int(raw: str | None, default: int) -> int:
        if raw is None:
            return default
        try:
            value = int(raw.strip())
        except ValueError:
            return default
        return value if value > 0 else default

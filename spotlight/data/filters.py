"""
Pagination and sorting inputs for list queries, and the metadata derived
from their results.
"""
from __future__ import annotations

import math
from typing import Tuple

from pydantic import BaseModel, Field

from spotlight.validator import Validator, permitted_value

MAX_PAGE = 10_000_000
MAX_PAGE_SIZE = 100


class Filters(BaseModel):
    """
    Page window and sort order requested for a list query.

    ``sort`` is a column name, optionally prefixed with ``-`` for descending
    order, and must be one of ``sort_safelist``.
    """

    page: int = Field(1, description="1-based page number.")
    page_size: int = Field(20, description="Rows per page.")
    sort: str = Field("id", description="Requested sort, e.g. 'title' or '-year'.")
    sort_safelist: Tuple[str, ...] = Field(
        ("id", "title", "year", "-id", "-title", "-year"),
        description="Permitted sort values.",
    )

    def sort_column(self) -> str:
        if self.sort in self.sort_safelist:
            return self.sort.lstrip("-")
        raise ValueError(f"unsafe sort parameter: {self.sort!r}")

    def sort_direction(self) -> str:
        return "DESC" if self.sort.startswith("-") else "ASC"

    def limit(self) -> int:
        return self.page_size

    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class Metadata(BaseModel):
    """Pagination summary for one list query; all zero when nothing matched."""

    current_page: int = 0
    page_size: int = 0
    first_page: int = 0
    last_page: int = 0
    total_records: int = 0

    model_config = {"frozen": True}


def validate_filters(v: Validator, filters: Filters) -> None:
    v.check(filters.page > 0, "page", "must be greater than zero")
    v.check(filters.page <= MAX_PAGE, "page", "must be a maximum of 10 million")
    v.check(filters.page_size > 0, "page_size", "must be greater than zero")
    v.check(filters.page_size <= MAX_PAGE_SIZE, "page_size", "must be a maximum of 100")
    v.check(
        permitted_value(filters.sort, *filters.sort_safelist), "sort", "invalid sort value"
    )


def calculate_metadata(total_records: int, page: int, page_size: int) -> Metadata:
    if total_records == 0:
        return Metadata()
    return Metadata(
        current_page=page,
        page_size=page_size,
        first_page=1,
        last_page=math.ceil(total_records / page_size),
        total_records=total_records,
    )


__all__ = ["Filters", "Metadata", "calculate_metadata", "validate_filters"]

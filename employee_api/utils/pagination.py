# employee_api/utils/pagination.py - Pagination helpers

from typing import Literal

from pydantic import BaseModel, Field

SortOrder = Literal["ASC", "DESC"]


class PaginationParams(BaseModel):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size

    @property
    def range_end(self) -> int:
        """Inclusive end index for PostgREST ``.range()``."""
        return self.offset + self.page_size - 1


class PaginatedResponse(BaseModel):
    items: list
    total: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def create(
        cls,
        items: list,
        total: int,
        pagination: PaginationParams,
    ) -> "PaginatedResponse":
        total_pages = (total + pagination.page_size - 1) // pagination.page_size
        return cls(
            items=items,
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
            total_pages=total_pages,
        )


def resolve_sort(
    sort_by: str | None,
    sort_order: str | None,
    columns: dict[str, str],
    default_column: str = "created_at",
) -> tuple[str, bool]:
    """
    Map an API sort key onto a column.
    Unknown keys fall back to ``default_column`` descending.
    Returns ``(column, desc)``.
    """
    key = (sort_by or "").strip().upper()
    column = columns.get(key)
    if column is None:
        return default_column, True
    return column, (sort_order or "DESC").strip().upper() != "ASC"

from pydantic import BaseModel
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

class Pagination(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def from_counts(cls, page: int, page_size: int, total: int) -> "Pagination":
        """Derive page count and neighbour flags from a total item count."""
        total_pages = -(-total // page_size) if page_size > 0 else 0
        return cls(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )

class ApiResponse(BaseModel, Generic[T]):
    success: bool
    data: T
    error: Optional[str] = None
    code: Optional[str] = None
    pagination: Optional[Pagination] = None

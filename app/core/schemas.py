"""Response envelope shared by every JSON endpoint: {success, data, message}."""

from math import ceil
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(page=page, limit=limit, total=total, total_pages=ceil(total / limit) if limit else 0)


class PaginatedData(BaseModel, Generic[T]):
    data: List[T] = Field(default_factory=list)
    pagination: PaginationMeta


class PageParams(BaseModel):
    page: int = Field(1, ge=1, description="1-based page number")
    limit: int = Field(20, ge=1, le=100, description="Items per page (max 100)")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

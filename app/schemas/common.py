"""Common schemas for the standard response envelope."""

from math import ceil
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema exchanged in camelCase; snake_case is accepted on input too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginationMeta(CamelModel):
    """Pagination metadata schema."""

    model_config = ConfigDict(
        json_schema_extra={"example": {"currentPage": 1, "totalPages": 5, "limit": 20}}
    )

    current_page: int = Field(..., description="Current page number", ge=1)
    total_pages: int = Field(..., description="Total number of pages", ge=0)
    limit: int = Field(..., description="Number of items per page", ge=1)


class Page(CamelModel, Generic[T]):
    """One page of a collection."""

    items: list[T] = Field(..., description="Items on this page")
    total: int = Field(..., description="Total number of items", ge=0)
    pagination: PaginationMeta

    @classmethod
    def build(cls, items: list[Any], total: int, page: int, limit: int) -> "Page[T]":
        return cls(
            items=items,
            total=total,
            pagination=PaginationMeta(
                current_page=page,
                total_pages=ceil(total / limit) if limit else 0,
                limit=limit,
            ),
        )


class StandardResponse(BaseModel, Generic[T]):
    """Standard response wrapper: ``{success, message, data}``."""

    model_config = ConfigDict(
        json_schema_extra={"example": {"success": True, "message": None, "data": {}}}
    )

    success: bool = Field(default=True, description="Whether the request succeeded")
    message: str | None = Field(default=None, description="Optional human-readable message")
    data: T | None = Field(default=None, description="Response data")


class ErrorDetail(BaseModel):
    """Machine-readable part of an error response."""

    code: str = Field(..., description="Error code (e.g., 'CROSS_TENANT_ACCESS')")
    details: dict | None = Field(None, description="Additional error details")


class ErrorResponse(BaseModel):
    """Error response schema."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "message": "Invalid token.",
                "error": {"code": "AUTH_INVALID_TOKEN", "details": None},
            }
        }
    )

    success: bool = False
    message: str
    error: ErrorDetail

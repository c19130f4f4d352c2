"""Shared response envelope and pagination schemas."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, SerializerFunctionWrapHandler, model_serializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

ENVELOPE_OPTIONAL_KEYS = frozenset({"message", "data", "pagination", "error"})


class CamelModel(BaseModel):
    """Base for API schemas: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorBody(CamelModel):
    code: str = Field(..., description="Stable machine-readable error code")
    message: str = Field(..., description="Human-readable message")
    details: Any | None = Field(default=None, description="Extra context (never secrets)")


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = (total + limit - 1) // limit if total else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class ApiResponse(CamelModel, Generic[T]):
    """Envelope returned by every endpoint."""

    success: bool = True
    message: str | None = None
    data: T | None = None
    pagination: Pagination | None = None
    error: ErrorBody | None = None

    @model_serializer(mode="wrap")
    def _omit_empty_envelope_keys(self, handler: SerializerFunctionWrapHandler):
        # Only the envelope's own optional keys are dropped; nulls inside data are kept.
        body = handler(self)
        return {
            key: value
            for key, value in body.items()
            if not (key in ENVELOPE_OPTIONAL_KEYS and value is None)
        }

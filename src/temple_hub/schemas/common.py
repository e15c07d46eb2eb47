"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

import math
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, Field, model_validator

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """JSON envelope wrapped around every successful response."""

    success: bool = True
    data: DataT | None = None
    message: str | None = None
    total: int | None = Field(None, description="Row count on list endpoints")


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class PagedEnvelope(Envelope[DataT], Generic[DataT]):
    """Envelope for paginated lists; ``total`` counts every matching row."""

    pagination: Pagination | None = None


class MessageEnvelope(BaseModel):
    """Envelope for operations that return no payload (deletes)."""

    success: bool = True
    message: str


class PartialUpdate(BaseModel):
    """Base for partial update bodies; omitted fields are left untouched.

    Fields listed in ``required_fields`` back NOT NULL columns, so an explicit
    ``null`` for them is a validation error rather than a database failure.
    """

    required_fields: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def _reject_nulls(self) -> PartialUpdate:
        nulls = sorted(
            name
            for name in self.model_fields_set & self.required_fields
            if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Return only the fields the client sent."""
        return self.model_dump(exclude_unset=True)


def ok(data: object = None, message: str | None = None, *, total: int | None = None) -> dict[str, object]:
    """Build a success envelope as a plain dict for ``response_model`` validation."""
    return {"success": True, "data": data, "message": message, "total": total}


def listing(rows: list, message: str | None = None) -> dict[str, object]:
    """Build a success envelope for a list result including ``total``."""
    return ok(rows, message, total=len(rows))


def paged(rows: list, *, page: int, limit: int, total: int) -> dict[str, object]:
    """Build a paginated success envelope."""
    envelope = ok(rows, total=total)
    envelope["pagination"] = {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit) if limit else 0,
    }
    return envelope

"""Typed product listing parameters and the query plan built from them."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from sqlalchemy import ColumnElement, and_, true

# Fields a listing may be ordered by, in their public (camelCase) spelling.
SORTABLE_FIELDS = frozenset(
    {"name", "price", "rating", "category", "createdAt", "updatedAt"}
)


def parse_finite_number(value: Any) -> float | None:
    """Parse ``value`` as a finite float, returning None when it is not one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def parse_integer(value: Any) -> int | None:
    """Parse ``value`` as an integer, truncating fractions toward zero."""
    number = parse_finite_number(value)
    return None if number is None else int(number)


class ProductListParams(BaseModel):
    """Recognised listing options, parsed defensively from untrusted input.

    Unparseable numbers and empty strings become ``None`` ("not supplied")
    instead of failing the request. Defaults and limits are applied later by
    the query builder.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True
    )

    category: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    min_rating: float | None = None
    search: str | None = None
    user_id: str | None = None
    sort_by: str | None = None
    sort_order: str | None = None
    page: int | None = None
    limit: int | None = None

    @field_validator("min_price", "max_price", "min_rating", mode="before")
    @classmethod
    def _finite_number(cls, value: Any) -> float | None:
        return parse_finite_number(value)

    @field_validator("page", "limit", mode="before")
    @classmethod
    def _integer(cls, value: Any) -> int | None:
        return parse_integer(value)

    @field_validator(
        "category", "search", "user_id", "sort_by", "sort_order", mode="before"
    )
    @classmethod
    def _non_empty_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value)
        return text if text.strip() else None


@dataclass(frozen=True)
class ProductQueryPlan:
    """Store query derived from listing parameters; executes nothing itself."""

    conditions: tuple[ColumnElement[bool], ...]
    sort_field: str
    descending: bool
    page: int
    limit: int
    skip: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "skip", (self.page - 1) * self.limit)

    @property
    def take(self) -> int:
        return self.limit

    @property
    def where(self) -> ColumnElement[bool]:
        """All filter criteria combined with AND; matches everything when empty."""
        if not self.conditions:
            return true()
        return and_(*self.conditions)


class Pagination(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def from_total(cls, total: int, page: int, limit: int) -> Pagination:
        return cls(
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if limit else 0,
        )


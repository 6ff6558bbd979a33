"""Translate product listing parameters into a store query plan.

Every supplied criterion narrows the result independently (logical AND).
Nothing here touches the database; :class:`ProductRepository` executes the
plan, re-using ``plan.where`` for the total count so the reported total always
matches the filtered items.
"""

from sqlalchemy import ColumnElement, or_
from sqlmodel import col

from src.catalog.core.models.query import (
    SORTABLE_FIELDS,
    ProductListParams,
    ProductQueryPlan,
)
from src.catalog.entities.service.product.table import ProductTable
from src.catalog.runtime.config.config_data import CatalogConfig
from src.catalog.runtime.context import get_config

_SNAKE_TO_CAMEL = {"created_at": "createdAt", "updated_at": "updatedAt"}

# keeps OFFSET + LIMIT inside the 64-bit signed integers stores bind them as
MAX_SKIP = 2**62


def build_filter(params: ProductListParams) -> tuple[ColumnElement[bool], ...]:
    conditions: list[ColumnElement[bool]] = []

    if params.category is not None:
        conditions.append(col(ProductTable.category) == params.category)

    if params.min_price is not None:
        conditions.append(col(ProductTable.price) >= params.min_price)
    if params.max_price is not None:
        conditions.append(col(ProductTable.price) <= params.max_price)

    if params.min_rating is not None:
        conditions.append(col(ProductTable.rating) >= params.min_rating)

    if params.search is not None:
        # case-insensitive substring, LIKE wildcards in the term are literal
        conditions.append(
            or_(
                col(ProductTable.name).icontains(params.search, autoescape=True),
                col(ProductTable.description).icontains(
                    params.search, autoescape=True
                ),
            )
        )

    if params.user_id is not None:
        conditions.append(col(ProductTable.owner_id) == params.user_id)

    return tuple(conditions)


def resolve_sort(
    params: ProductListParams, catalog: CatalogConfig
) -> tuple[str, bool]:
    """Return ``(field, descending)``; unknown fields fall back to the default."""
    sort_by = params.sort_by or catalog.default_sort_by
    sort_by = _SNAKE_TO_CAMEL.get(sort_by, sort_by)
    if sort_by not in catalog.sortable_fields or sort_by not in SORTABLE_FIELDS:
        sort_by = catalog.default_sort_by

    sort_order = params.sort_order or catalog.default_sort_order
    return sort_by, sort_order != "asc"


def resolve_window(
    page: int | None, limit: int | None, catalog: CatalogConfig
) -> tuple[int, int]:
    """Apply defaults and clamp to ``page >= 1`` and ``1 <= limit <= max``.

    Pages whose skip would not fit the store are pulled back to the last
    addressable page, which is always past the end of any real listing.
    """
    resolved_limit = limit if limit is not None else catalog.default_page_size
    resolved_limit = min(max(resolved_limit, 1), catalog.max_page_size)
    resolved_page = max(page if page is not None else 1, 1)
    resolved_page = min(resolved_page, MAX_SKIP // resolved_limit + 1)
    return resolved_page, resolved_limit


def build_product_query(
    params: ProductListParams, catalog: CatalogConfig | None = None
) -> ProductQueryPlan:
    catalog = catalog or get_config().catalog
    sort_field, descending = resolve_sort(params, catalog)
    page, limit = resolve_window(params.page, params.limit, catalog)
    return ProductQueryPlan(
        conditions=build_filter(params),
        sort_field=sort_field,
        descending=descending,
        page=page,
        limit=limit,
    )


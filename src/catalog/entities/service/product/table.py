"""Product database table model."""

import sqlalchemy as sa
from sqlmodel import Field

from src.catalog.entities.core._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products."""

    __tablename__ = "products"
    __table_args__ = (
        sa.CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        sa.CheckConstraint(
            "rating >= 0 AND rating <= 5", name="ck_products_rating_range"
        ),
        sa.Index("ix_products_name_description", "name", "description"),
    )

    name: str
    description: str
    category: str = Field(index=True)
    price: float
    rating: float = Field(default=0)
    image_url: str | None = None
    owner_id: str = Field(foreign_key="users.id", index=True)

"""Product repository for data access operations."""

from typing import Any

from sqlalchemy import func
from sqlmodel import Session, col, select

from src.catalog.core.models.query import ProductQueryPlan
from src.catalog.entities.core._base import utcnow
from src.catalog.entities.core.user.entity import OwnerProfile
from src.catalog.entities.core.user.table import UserTable
from src.catalog.entities.service.product.entity import Product, ProductDetails
from src.catalog.entities.service.product.table import ProductTable

SORT_COLUMNS = {
    "name": ProductTable.name,
    "price": ProductTable.price,
    "rating": ProductTable.rating,
    "category": ProductTable.category,
    "createdAt": ProductTable.created_at,
    "updatedAt": ProductTable.updated_at,
}


class ProductRepository:
    """Data-access layer for products.

    Reads come back joined with the owner's public profile (name, email) via
    an outer join, so a product whose owner was removed is still listed.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, product_id: str) -> Product | None:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None
        return Product.model_validate(row, from_attributes=True)

    def get_details(self, product_id: str) -> ProductDetails | None:
        statement = self._select_with_owner().where(col(ProductTable.id) == product_id)
        result = self._session.exec(statement).first()
        if result is None:
            return None
        return self._to_details(*result)

    def create(self, product: Product) -> Product:
        row = ProductTable(**product.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Product.model_validate(row, from_attributes=True)

    def update(self, product_id: str, changes: dict[str, Any]) -> Product | None:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None
        for key, value in changes.items():
            setattr(row, key, value)
        row.updated_at = utcnow()
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Product.model_validate(row, from_attributes=True)

    def delete(self, product_id: str) -> bool:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def count(self, plan: ProductQueryPlan) -> int:
        statement = select(func.count()).select_from(ProductTable).where(plan.where)
        return self._session.exec(statement).one()

    def find(self, plan: ProductQueryPlan) -> list[ProductDetails]:
        statement = (
            self._select_with_owner()
            .where(plan.where)
            .order_by(*self._order_by(plan))
            .offset(plan.skip)
            .limit(plan.take)
        )
        return [self._to_details(*result) for result in self._session.exec(statement)]

    def list_all(self) -> list[Product]:
        rows = self._session.exec(select(ProductTable))
        return [Product.model_validate(row, from_attributes=True) for row in rows]

    @staticmethod
    def _order_by(plan: ProductQueryPlan) -> tuple:
        column = col(SORT_COLUMNS.get(plan.sort_field, ProductTable.created_at))
        primary = column.desc() if plan.descending else column.asc()
        # id breaks ties so pages never overlap
        return primary, col(ProductTable.id).asc()

    @staticmethod
    def _select_with_owner():
        return select(ProductTable, UserTable.name, UserTable.email).join(
            UserTable, col(UserTable.id) == col(ProductTable.owner_id), isouter=True
        )

    @staticmethod
    def _to_details(
        row: ProductTable, owner_name: str | None, owner_email: str | None
    ) -> ProductDetails:
        details = ProductDetails.model_validate(row, from_attributes=True)
        if owner_name is not None and owner_email is not None:
            details.owner = OwnerProfile(
                id=row.owner_id, name=owner_name, email=owner_email
            )
        return details

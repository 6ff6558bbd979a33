"""Product use cases: create, browse, update and delete listings."""

from collections.abc import Mapping
from typing import Any

from loguru import logger
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from src.catalog.core.exceptions import (
    Forbidden,
    InvalidArgument,
    NotFound,
    ValidationError,
)
from src.catalog.core.models.query import Pagination, ProductListParams
from src.catalog.core.services.product.query_builder import build_product_query
from src.catalog.core.services.storage.object_storage import (
    ObjectStorage,
    UploadedImage,
)
from src.catalog.entities.core._base import is_valid_identifier
from src.catalog.entities.core.user.repository import UserRepository
from src.catalog.entities.service.product.entity import (
    Product,
    ProductCreate,
    ProductDetails,
    ProductUpdate,
)
from src.catalog.entities.service.product.repository import ProductRepository


class ProductPage(BaseModel):
    """One window of a product listing plus its pagination summary."""

    items: list[ProductDetails]
    pagination: Pagination


def _supplied(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Drop fields the client did not really send (absent, null or blank)."""
    return {
        key: value
        for key, value in fields.items()
        if value is not None and not (isinstance(value, str) and not value.strip())
    }


class ProductService:
    """Orchestrates product operations over one database session.

    Every write commits before returning. Reads are joined with the owner's
    public profile.
    """

    def __init__(self, db_session: Session, storage: ObjectStorage | None = None):
        self._db_session = db_session
        self._products = ProductRepository(db_session)
        self._users = UserRepository(db_session)
        self._storage = storage

    def create(
        self,
        owner_id: str,
        fields: Mapping[str, Any],
        image: UploadedImage | None = None,
    ) -> ProductDetails:
        try:
            data = ProductCreate.model_validate(_supplied(fields))
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        if self._users.get(owner_id) is None:
            raise ValidationError(
                "Owner does not exist", [{"field": "ownerId", "value": owner_id}]
            )

        image_url = self._upload(image) if image is not None else data.image_url
        product = Product(
            **data.model_dump(exclude={"image_url"}),
            image_url=image_url,
            owner_id=owner_id,
        )
        created = self._products.create(product)
        self._db_session.commit()

        logger.info("product.created", product_id=created.id, owner_id=owner_id)
        return self._details(created.id)

    def list_products(self, params: ProductListParams) -> ProductPage:
        plan = build_product_query(params)
        total = self._products.count(plan)
        items = self._products.find(plan) if total else []
        return ProductPage(
            items=items,
            pagination=Pagination.from_total(total, plan.page, plan.limit),
        )

    def get_by_id(self, product_id: str) -> ProductDetails:
        self._check_identifier(product_id)
        return self._details(product_id)

    def update(
        self,
        product_id: str,
        caller_id: str,
        caller_role: str,
        fields: Mapping[str, Any],
        image: UploadedImage | None = None,
    ) -> ProductDetails:
        """Apply a partial update; only supplied fields change.

        Raises:
            InvalidArgument: malformed id
            NotFound: no such product
            Forbidden: caller is neither owner nor admin
            ValidationError: a supplied field violates a product constraint
        """
        existing = self._get_authorized(product_id, caller_id, caller_role, "update")

        try:
            changes = ProductUpdate.model_validate(_supplied(fields)).changes()
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        if image is not None:
            changes["image_url"] = self._upload(image)

        self._products.update(existing.id, changes)
        self._db_session.commit()

        logger.info(
            "product.updated",
            product_id=existing.id,
            caller_id=caller_id,
            fields=sorted(changes),
        )
        return self._details(existing.id)

    def delete(self, product_id: str, caller_id: str, caller_role: str) -> None:
        existing = self._get_authorized(product_id, caller_id, caller_role, "delete")
        self._products.delete(existing.id)
        self._db_session.commit()
        logger.info("product.deleted", product_id=existing.id, caller_id=caller_id)

    def upload_image(self, image: UploadedImage) -> str:
        """Store an image on its own; the URL can be sent later as ``imageUrl``."""
        return self._upload(image)

    def _upload(self, image: UploadedImage) -> str:
        if self._storage is None:
            raise ValidationError("Image uploads are not configured")
        return self._storage.upload(image)

    def _get_authorized(
        self, product_id: str, caller_id: str, caller_role: str, action: str
    ) -> Product:
        self._check_identifier(product_id)
        product = self._products.get(product_id)
        if product is None:
            raise NotFound("Product", product_id)

        if product.owner_id != caller_id and caller_role != "admin":
            logger.warning(
                "Denied {} of product {} to {}", action, product_id, caller_id
            )
            raise Forbidden(f"Not authorized to {action} this product")
        return product

    def _details(self, product_id: str) -> ProductDetails:
        details = self._products.get_details(product_id)
        if details is None:
            raise NotFound("Product", product_id)
        return details

    @staticmethod
    def _check_identifier(product_id: str) -> None:
        if not is_valid_identifier(product_id):
            raise InvalidArgument(
                "product id", product_id, message="Invalid product ID format"
            )

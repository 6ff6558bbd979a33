"""Entity: Product."""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from src.catalog.entities.core._base import Entity
from src.catalog.entities.core.user.entity import OwnerProfile

ProductText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Price = Annotated[float, Field(ge=0, allow_inf_nan=False)]
Rating = Annotated[float, Field(ge=0, le=5, allow_inf_nan=False)]


class Product(Entity):
    """Product listing owned by a user.

    ``owner_id`` is fixed at creation; only the owner or an admin may change
    or delete the listing.
    """

    name: ProductText = Field(description="Product name")
    description: ProductText = Field(description="Product description")
    category: ProductText = Field(description="Product category")
    price: Price = Field(description="Price, never negative")
    rating: Rating = Field(default=0, description="Rating between 0 and 5")
    image_url: str | None = Field(default=None, description="Public image URL")
    owner_id: str = Field(description="Identifier of the owning user")

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.description == other.description
            and self.category == other.category
            and self.price == other.price
            and self.rating == other.rating
            and self.image_url == other.image_url
            and self.owner_id == other.owner_id
        )

    def __hash__(self) -> int:
        return hash((
            self.id,
            self.name,
            self.description,
            self.category,
            self.price,
            self.rating,
            self.image_url,
            self.owner_id,
        ))


class ProductDetails(Product):
    """A product joined with its owner's public profile."""

    owner: OwnerProfile | None = Field(
        default=None, description="Owner name and email; None if the owner is gone"
    )


class _ProductInput(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class ProductCreate(_ProductInput):
    """Client-supplied fields for a new product."""

    name: ProductText
    description: ProductText
    category: ProductText
    price: Price
    rating: Rating = 0
    image_url: str | None = None


class ProductUpdate(_ProductInput):
    """Partial update; fields left unset (or null) are not touched."""

    name: ProductText | None = None
    description: ProductText | None = None
    category: ProductText | None = None
    price: Price | None = None
    rating: Rating | None = None
    image_url: str | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)

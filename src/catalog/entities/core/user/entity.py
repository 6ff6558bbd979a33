"""User domain entity."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.catalog.entities.core._base import Entity

Role = Literal["user", "admin"]


class User(Entity):
    """A registered account.

    The password hash never leaves the table model; this entity is what
    services and responses work with.
    """

    name: str = Field(description="Display name")
    email: str = Field(description="Login email, stored lower-cased")
    role: Role = Field(default="user", description="Authorization role")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def public_profile(self) -> "OwnerProfile":
        return OwnerProfile(id=self.id, name=self.name, email=self.email)

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.email == other.email
            and self.role == other.role
        )

    def __hash__(self) -> int:
        return hash((self.id, self.name, self.email, self.role))


class OwnerProfile(BaseModel):
    """Public fields of a product owner; never includes credentials."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str

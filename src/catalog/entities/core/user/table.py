"""User database table model."""

from sqlmodel import Field

from src.catalog.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users."""

    __tablename__ = "users"

    name: str
    email: str = Field(index=True, unique=True)
    role: str = Field(default="user")
    password_hash: str

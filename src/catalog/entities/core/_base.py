import uuid
from datetime import UTC, datetime

import sqlalchemy as sa
from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from pydantic.alias_generators import to_camel
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(UTC)


def is_valid_identifier(value: str | None) -> bool:
    """Return True if ``value`` has the shape of a store-generated identifier.

    Only the canonical lower-case hyphenated form counts; braces, ``urn:uuid:``
    prefixes, upper case and bare hex are rejected.
    """
    if not value:
        return False
    try:
        parsed = uuid.UUID(str(value))
    except ValueError:
        return False
    return str(parsed) == value


class Entity(BaseModel):
    """Base entity class with auto-generated UUID identifier.

    Serialises with camelCase keys (``createdAt``) while accepting either
    spelling on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = PydanticField(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the entity",
    )

    created_at: datetime = PydanticField(default_factory=utcnow)
    updated_at: datetime = PydanticField(default_factory=utcnow)


class EntityTable(SQLModel, table=False):
    """Base table with a UUID primary key and store-managed timestamps."""

    id: str = Field(
        primary_key=True,
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the entity",
    )

    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "onupdate": sa.func.now(),
        },
    )

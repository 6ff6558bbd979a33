from sqlmodel import Session, col, select

from src.catalog.entities.core._base import utcnow
from src.catalog.entities.core.user.entity import User
from src.catalog.entities.core.user.table import UserTable


class UserRepository:
    """Data-access layer for users."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: str) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def get_by_email(self, email: str) -> User | None:
        row = self._get_row_by_email(email)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def get_password_hash(self, email: str) -> tuple[User, str] | None:
        """Return the user and their stored hash, for credential checks only."""
        row = self._get_row_by_email(email)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True), row.password_hash

    def create(self, user: User, password_hash: str) -> User:
        row = UserTable(
            id=user.id,
            name=user.name,
            email=user.email.lower(),
            role=user.role,
            password_hash=password_hash,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def set_role(self, user_id: str, role: str) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        row.role = role
        row.updated_at = utcnow()
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def list_all(self) -> list[User]:
        rows = self._session.exec(select(UserTable).order_by(col(UserTable.created_at)))
        return [User.model_validate(row, from_attributes=True) for row in rows]

    def _get_row_by_email(self, email: str) -> UserTable | None:
        statement = select(UserTable).where(UserTable.email == email.strip().lower())
        return self._session.exec(statement).first()

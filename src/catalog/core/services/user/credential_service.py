"""Registration, login and bearer-token resolution for catalog users."""

from dataclasses import dataclass
from typing import Annotated

from loguru import logger
from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from src.catalog.core.exceptions import (
    AuthenticationFailure,
    Conflict,
    NotFound,
    ValidationError,
)
from src.catalog.core.security import hash_password, verify_password
from src.catalog.core.services.jwt.jwt_gen import JwtGeneratorService
from src.catalog.core.services.jwt.jwt_verify import JwtVerificationService
from src.catalog.entities.core.user.entity import Role, User
from src.catalog.entities.core.user.repository import UserRepository

MIN_PASSWORD_LENGTH = 6

_INVALID_CREDENTIALS = "Invalid email or password"


class Registration(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str
    password: str


@dataclass(frozen=True)
class AuthResult:
    token: str
    user: User


class CredentialService:
    """Stores users, checks passwords and issues/resolves access tokens."""

    def __init__(
        self,
        db_session: Session,
        jwt_generator: JwtGeneratorService | None = None,
        jwt_verifier: JwtVerificationService | None = None,
    ):
        self._db_session = db_session
        self._users = UserRepository(db_session)
        self._jwt_generator = jwt_generator or JwtGeneratorService()
        self._jwt_verifier = jwt_verifier or JwtVerificationService()

    def create_user(
        self, name: str, email: str, password: str, role: Role = "user"
    ) -> User:
        """Validate and persist a new account.

        Raises:
            ValidationError: name/email/password fail validation
            Conflict: the email is already registered
        """
        try:
            registration = Registration(name=name, email=email, password=password)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        if self._users.get_by_email(registration.email) is not None:
            raise Conflict("User already exists", details={"email": registration.email})

        user = self._users.create(
            User(name=registration.name, email=registration.email, role=role),
            hash_password(registration.password),
        )
        self._db_session.commit()
        logger.info("user.registered", user_id=user.id, role=user.role)
        return user

    def register(self, name: str, email: str, password: str) -> AuthResult:
        """Self-registration; the role is always ``user``."""
        user = self.create_user(name, email, password)
        return AuthResult(token=self.issue_token(user), user=user)

    def login(self, email: str, password: str) -> AuthResult:
        """Check credentials; unknown email and wrong password look the same."""
        found = self._users.get_password_hash(email or "")
        if found is None or not verify_password(password or "", found[1]):
            raise AuthenticationFailure("invalid_credentials", _INVALID_CREDENTIALS)

        user = found[0]
        logger.info("user.login", user_id=user.id)
        return AuthResult(token=self.issue_token(user), user=user)

    def issue_token(self, user: User) -> str:
        return self._jwt_generator.generate_access_token(user.id, user.role)

    def authenticate_token(self, token: str) -> User:
        """Resolve a bearer token to its user, re-reading the role from the store.

        Raises:
            AuthenticationFailure: token invalid/expired or the user is gone
        """
        claims = self._jwt_verifier.verify_access_token(token)
        user = self._users.get(claims.subject)
        if user is None:
            raise AuthenticationFailure("user_not_found", "User not found")
        return user

    def set_role(self, email: str, role: Role) -> User:
        user = self._users.get_by_email(email)
        if user is None:
            raise NotFound("User", email)

        updated = self._users.set_role(user.id, role)
        self._db_session.commit()
        logger.info("user.role_changed", user_id=user.id, role=role)
        return updated

    def list_users(self) -> list[User]:
        return self._users.list_all()

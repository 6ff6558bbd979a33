"""Account endpoints: registration, login and the current user."""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.catalog.api.http.deps import get_credential_service, get_current_user
from src.catalog.core.services import AuthResult, CredentialService
from src.catalog.core.services.user.credential_service import LoginRequest
from src.catalog.entities.core.user import Role, User

router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""


class UserResponse(BaseModel):
    """Public profile of an account; never includes the password hash."""

    id: str
    name: str
    email: str
    role: Role

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, name=user.name, email=user.email, role=user.role)


class AuthResponse(BaseModel):
    token: str
    user: UserResponse

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        return cls(token=result.token, user=UserResponse.from_user(result.user))


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
def register(
    body: RegisterRequest,
    credentials: CredentialService = Depends(get_credential_service),
) -> AuthResponse:
    """Create an account with the ``user`` role and return a token for it."""
    result = credentials.register(body.name, body.email, body.password)
    return AuthResponse.from_result(result)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    credentials: CredentialService = Depends(get_credential_service),
) -> AuthResponse:
    return AuthResponse.from_result(credentials.login(body.email, body.password))


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.from_user(user)

"""Registration, login and token resolution."""

import pytest

from src.catalog.core.exceptions import AuthenticationFailure, Conflict, ValidationError
from src.catalog.core.services import CredentialService, JwtGeneratorService


class TestRegister:
    def test_creates_user_and_issues_token(self, credential_service: CredentialService):
        result = credential_service.register("Jane", "jane@example.com", "secret123")

        assert result.token
        assert result.user.name == "Jane"
        assert result.user.email == "jane@example.com"
        assert result.user.role == "user"

    def test_email_is_stored_lower_cased(self, credential_service):
        result = credential_service.register("Jane", "Jane@Example.com", "secret123")
        assert result.user.email == "jane@example.com"

    def test_duplicate_email_conflicts_case_insensitively(self, credential_service, owner):
        with pytest.raises(Conflict, match="User already exists"):
            credential_service.register("Copy", owner.email.upper(), "secret123")

    def test_short_password(self, credential_service):
        with pytest.raises(ValidationError, match="password"):
            credential_service.register("Jane", "jane@example.com", "12345")

    @pytest.mark.parametrize(
        ("name", "email"), [("", "jane@example.com"), ("Jane", "not-an-email")]
    )
    def test_invalid_profile(self, credential_service, name, email):
        with pytest.raises(ValidationError):
            credential_service.register(name, email, "secret123")

    def test_password_is_never_stored_in_plain_text(self, credential_service, session):
        from src.catalog.entities.core.user import UserTable

        result = credential_service.register("Jane", "jane@example.com", "secret123")

        row = session.get(UserTable, result.user.id)
        assert row.password_hash != "secret123"
        assert row.password_hash.startswith("$2")


class TestLogin:
    def test_valid_credentials(self, credential_service, owner, test_password):
        result = credential_service.login(owner.email, test_password)
        assert result.user.id == owner.id
        assert result.token

    def test_email_lookup_ignores_case(self, credential_service, owner, test_password):
        assert credential_service.login(owner.email.upper(), test_password).user.id == owner.id

    def test_wrong_password_and_unknown_email_look_the_same(self, credential_service, owner):
        with pytest.raises(AuthenticationFailure) as wrong_password:
            credential_service.login(owner.email, "not-the-password")
        with pytest.raises(AuthenticationFailure) as unknown_email:
            credential_service.login("nobody@example.com", "whatever")

        assert wrong_password.value.reason == unknown_email.value.reason == "invalid_credentials"
        assert wrong_password.value.message == unknown_email.value.message


class TestAuthenticateToken:
    def test_resolves_user(self, credential_service, owner, token_for):
        assert credential_service.authenticate_token(token_for(owner)).id == owner.id

    def test_role_is_read_from_the_store(self, credential_service, owner, token_for):
        token = token_for(owner)
        credential_service.set_role(owner.email, "admin")

        assert credential_service.authenticate_token(token).role == "admin"

    def test_unknown_user(self, credential_service):
        token = JwtGeneratorService().generate_access_token(
            "00000000-0000-0000-0000-000000000000", "user"
        )
        with pytest.raises(AuthenticationFailure) as exc_info:
            credential_service.authenticate_token(token)
        assert exc_info.value.reason == "user_not_found"

    def test_garbage_token(self, credential_service):
        with pytest.raises(AuthenticationFailure) as exc_info:
            credential_service.authenticate_token("not.a.jwt")
        assert exc_info.value.reason == "invalid_token"


def test_list_users(credential_service, owner, admin):
    emails = {user.email for user in credential_service.list_users()}
    assert emails == {owner.email, admin.email}

import time

import pytest
from authlib.jose import jwt

from src.catalog.core.exceptions import AuthenticationFailure
from src.catalog.core.services import JwtGeneratorService, JwtVerificationService
from src.catalog.runtime.config.config_data import ConfigData
from src.catalog.runtime.context import get_config, with_context


class TestJWTService:
    def test_generate_verify_roundtrip(
        self,
        jwt_generate_service: JwtGeneratorService,
        jwt_verify_service: JwtVerificationService,
    ):
        token = jwt_generate_service.generate_access_token("user-123", "admin")

        claims = jwt_verify_service.verify_access_token(token)

        assert claims.subject == "user-123"
        assert claims.role == "admin"
        assert claims.expires_at - claims.issued_at == get_config().jwt.access_token_ttl_seconds

    def test_registered_claims_cannot_be_overridden(self, jwt_generate_service, jwt_verify_service):
        token = jwt_generate_service.generate_jwt(
            subject="user-123", claims={"sub": "someone-else", "iss": "evil"}
        )

        assert jwt_verify_service.verify_access_token(token).subject == "user-123"

    def test_expired_token(self, jwt_generate_service, jwt_verify_service):
        token = jwt_generate_service.generate_jwt(subject="user-123", expires_in_seconds=-3600)

        with pytest.raises(AuthenticationFailure) as exc_info:
            jwt_verify_service.verify_access_token(token)
        assert exc_info.value.reason == "token_expired"
        assert exc_info.value.message == "Token expired"

    def test_expiry_within_clock_skew_is_accepted(self, jwt_generate_service, jwt_verify_service):
        token = jwt_generate_service.generate_jwt(subject="user-123", expires_in_seconds=-5)
        assert jwt_verify_service.verify_access_token(token).subject == "user-123"

    def test_wrong_signature(self, jwt_generate_service, jwt_verify_service):
        token = jwt_generate_service.generate_jwt(subject="user-123", secret="another-secret")

        with pytest.raises(AuthenticationFailure) as exc_info:
            jwt_verify_service.verify_access_token(token)
        assert exc_info.value.reason == "invalid_token"

    def test_custom_secret_roundtrip(self, jwt_generate_service, jwt_verify_service):
        token = jwt_generate_service.generate_jwt(subject="user-123", secret="another-secret")
        claims = jwt_verify_service.verify_access_token(token, secret="another-secret")
        assert claims.subject == "user-123"

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_undecodable_token(self, jwt_verify_service, token):
        with pytest.raises(AuthenticationFailure) as exc_info:
            jwt_verify_service.verify_access_token(token)
        assert exc_info.value.reason == "invalid_token"

    def test_foreign_audience_is_rejected(self, jwt_generate_service, jwt_verify_service):
        override = ConfigData()
        override.jwt.audience = "some-other-api"
        with with_context(override):
            token = jwt_generate_service.generate_access_token("user-123", "user")

        with pytest.raises(AuthenticationFailure) as exc_info:
            jwt_verify_service.verify_access_token(token)
        assert exc_info.value.reason == "invalid_token"

    def test_token_without_subject_is_rejected(self, jwt_verify_service):
        cfg = get_config()
        now = int(time.time())
        payload = {"iss": cfg.jwt.issuer, "aud": cfg.jwt.audience, "iat": now, "exp": now + 60}
        token = jwt.encode({"alg": "HS256"}, payload, cfg.app.jwt_secret).decode()

        with pytest.raises(AuthenticationFailure) as exc_info:
            jwt_verify_service.verify_access_token(token)
        assert exc_info.value.reason == "invalid_token"

import time
from typing import Any

from authlib.common.security import generate_token
from authlib.jose import JoseError, jwt

from src.catalog.core.exceptions import CatalogError
from src.catalog.runtime.context import get_config

_REGISTERED_CLAIMS = {"iss", "sub", "aud", "exp", "iat", "nbf", "jti"}


class JwtGeneratorService:
    """Service for issuing signed access tokens."""

    def generate_jwt(
        self,
        subject: str,
        claims: dict[str, Any] | None = None,
        expires_in_seconds: int | None = None,
        secret: str | None = None,
    ) -> str:
        """Generate a signed JWT using authlib.

        Args:
            subject: Subject (sub) claim, the user id
            claims: Additional claims; registered claim names are ignored
            expires_in_seconds: Token lifetime (defaults to the configured TTL)
            secret: Signing secret (defaults to the configured app secret)

        Returns:
            Signed JWT token string

        Raises:
            CatalogError: If no secret is configured or encoding fails
        """
        config = get_config()
        secret = secret or config.app.jwt_secret
        if not secret:
            raise CatalogError("JWT signing secret not configured")

        lifetime = (
            expires_in_seconds
            if expires_in_seconds is not None
            else config.jwt.access_token_ttl_seconds
        )
        now = int(time.time())
        payload = {
            "iss": config.jwt.issuer,
            "sub": subject,
            "aud": config.jwt.audience,
            "exp": now + lifetime,
            "iat": now,
            "nbf": now,
            "jti": generate_token(16),
        }
        if claims:
            payload.update(
                {k: v for k, v in claims.items() if k not in _REGISTERED_CLAIMS}
            )

        header = {"alg": config.jwt.algorithm, "typ": "JWT"}
        try:
            token = jwt.encode(header, payload, secret)
        except JoseError as e:
            raise CatalogError(f"JWT encoding failed: {e}") from e

        # authlib returns bytes
        return token.decode() if isinstance(token, bytes) else token

    def generate_access_token(self, user_id: str, role: str, **extra_claims) -> str:
        """Issue the bearer token handed out on registration and login."""
        claims = {get_config().jwt.role_claim: role}
        claims.update(extra_claims)
        return self.generate_jwt(subject=user_id, claims=claims)

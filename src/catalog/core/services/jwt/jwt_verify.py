"""JWT verification service."""

from dataclasses import dataclass

from authlib.jose import JoseError, jwt
from authlib.jose.errors import ExpiredTokenError
from loguru import logger

from src.catalog.core.exceptions import AuthenticationFailure
from src.catalog.runtime.context import get_config


@dataclass(frozen=True)
class AccessTokenClaims:
    """Verified claims of an access token."""

    subject: str
    role: str | None
    issued_at: int | None
    expires_at: int | None


class JwtVerificationService:
    def verify_access_token(
        self, token: str, *, secret: str | None = None
    ) -> AccessTokenClaims:
        """Verify signature, issuer, audience and lifetime of ``token``.

        Raises:
            AuthenticationFailure: ``token_expired`` when the token is past its
                expiry, ``invalid_token`` for anything else that fails.
        """
        cfg = get_config()
        key = secret or cfg.app.jwt_secret
        claims_options = {
            "iss": {"essential": True, "values": [cfg.jwt.issuer]},
            "aud": {"essential": True, "values": [cfg.jwt.audience]},
            "sub": {"essential": True},
            "exp": {"essential": True},
        }

        try:
            claims = jwt.decode(token, key, claims_options=claims_options)
            claims.validate(leeway=cfg.jwt.clock_skew)
        except ExpiredTokenError as exc:
            raise AuthenticationFailure("token_expired", "Token expired") from exc
        except (JoseError, ValueError) as exc:
            logger.debug("Rejected access token: {}", exc)
            raise AuthenticationFailure("invalid_token", "Invalid token") from exc

        return AccessTokenClaims(
            subject=str(claims["sub"]),
            role=claims.get(cfg.jwt.role_claim),
            issued_at=claims.get("iat"),
            expires_at=claims.get("exp"),
        )

"""JWT service package."""

from .jwt_gen import JwtGeneratorService
from .jwt_verify import AccessTokenClaims, JwtVerificationService

__all__ = ["AccessTokenClaims", "JwtGeneratorService", "JwtVerificationService"]

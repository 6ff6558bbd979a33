"""Core services exports."""

from .database.db_session import DbSessionService
from .jwt.jwt_gen import JwtGeneratorService
from .jwt.jwt_verify import AccessTokenClaims, JwtVerificationService
from .product.product_service import ProductPage, ProductService
from .storage.object_storage import (
    LocalObjectStorage,
    ObjectStorage,
    S3ObjectStorage,
    UploadedImage,
    build_object_storage,
)
from .user.credential_service import AuthResult, CredentialService

__all__ = [
    # Database Service
    "DbSessionService",
    # JWT Services
    "AccessTokenClaims",
    "JwtGeneratorService",
    "JwtVerificationService",
    # Product Services
    "ProductPage",
    "ProductService",
    # Object Storage
    "LocalObjectStorage",
    "ObjectStorage",
    "S3ObjectStorage",
    "UploadedImage",
    "build_object_storage",
    # User Services
    "AuthResult",
    "CredentialService",
]

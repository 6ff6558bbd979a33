"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"]
    )
    allow_credentials: bool = False
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(
        default=["Content-Type", "Authorization", "X-Requested-With", "Accept"]
    )


class JWTConfig(BaseModel):
    """Access token generation and validation configuration."""

    algorithm: str = Field(default="HS256", description="Signing algorithm")
    issuer: str = Field(
        default="product-catalog", description="Issuer claim for generated tokens"
    )
    audience: str = Field(
        default="product-catalog-api", description="Audience claim for generated tokens"
    )
    access_token_ttl_seconds: int = Field(
        default=7 * 24 * 3600, description="Access token lifetime in seconds"
    )
    clock_skew: int = Field(default=60, description="Clock skew tolerance in seconds")
    role_claim: str = Field(default="role", description="Claim carrying the user role")


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./catalog.db", description="Database connection URL"
    )
    echo: bool = Field(default=False, description="Echo SQL statements")
    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    connect_retries: int = Field(
        default=3, ge=1, description="Connection attempts before giving up"
    )
    connect_retry_delay_seconds: float = Field(
        default=3.0, ge=0, description="Fixed delay between connection attempts"
    )
    connect_timeout_seconds: float = Field(
        default=5.0, gt=0, description="Overall deadline for the connection bootstrap"
    )

    @computed_field
    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class StorageConfig(BaseModel):
    """Object storage configuration for product images."""

    backend: Literal["local", "s3"] = Field(
        default="local", description="Where uploaded images are stored"
    )
    local_directory: str = Field(
        default="uploads", description="Directory for the local backend"
    )
    local_url_prefix: str = Field(
        default="/uploads", description="URL path the local directory is served under"
    )
    s3_bucket: str | None = Field(default=None, description="S3 bucket name")
    s3_prefix: str = Field(default="products/", description="Key prefix inside the bucket")
    s3_endpoint_url: str | None = Field(
        default=None, description="Custom endpoint for S3-compatible providers"
    )
    s3_region: str = Field(default="us-east-1", description="S3 region")
    s3_access_key_id: str | None = Field(default=None)
    s3_secret_access_key: str | None = Field(default=None)
    public_base_url: str | None = Field(
        default=None, description="Base URL uploaded objects are publicly served from"
    )
    allowed_content_types: list[str] = Field(
        default_factory=lambda: [
            "image/jpeg",
            "image/png",
            "image/gif",
            "image/webp",
        ]
    )
    max_upload_bytes: int = Field(default=5 * 1024 * 1024)


class CatalogConfig(BaseModel):
    """Product listing defaults and limits."""

    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)
    default_sort_by: str = Field(default="createdAt")
    default_sort_order: Literal["asc", "desc"] = Field(default="desc")
    sortable_fields: list[str] = Field(
        default_factory=lambda: [
            "name",
            "price",
            "rating",
            "category",
            "createdAt",
            "updatedAt",
        ]
    )
    categories: list[str] = Field(
        default_factory=lambda: [
            "Electronics",
            "Clothing",
            "Books",
            "Home & Kitchen",
            "Beauty",
            "Sports",
            "Toys",
            "Others",
        ],
        description="Categories offered to clients; not enforced on write",
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="0.0.0.0", description="Application host")
    port: int = Field(default=5000, description="Application port")
    api_prefix: str = Field(default="/api", description="Prefix for API routers")
    jwt_secret: str = Field(
        default="dev-jwt-secret", description="Secret for signing access tokens"
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="JWT configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    storage: StorageConfig = Field(
        default_factory=StorageConfig, description="Object storage configuration"
    )
    catalog: CatalogConfig = Field(
        default_factory=CatalogConfig, description="Product listing configuration"
    )

"""FastAPI dependency implementations."""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from fastapi import Depends, Request
from sqlmodel import Session
from starlette.datastructures import UploadFile

from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.core.exceptions import AuthenticationFailure, ValidationError
from src.catalog.core.models.query import ProductListParams
from src.catalog.core.services import (
    CredentialService,
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
    ObjectStorage,
    ProductService,
    UploadedImage,
)
from src.catalog.entities.core.user import User

IMAGE_FIELD = "image"

_FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_database_service(request: Request) -> DbSessionService:
    """Get the database service instance."""
    return get_app_dependencies(request).database_service


def get_db_session(
    database_service: DbSessionService = Depends(get_database_service),
) -> Iterator[Session]:
    """Yield a request-scoped session; rolled back if the request fails."""
    with database_service.session_scope() as session:
        yield session


def get_object_storage(request: Request) -> ObjectStorage:
    """Get the configured image storage backend."""
    return get_app_dependencies(request).object_storage


def get_jwt_verify_service(request: Request) -> JwtVerificationService:
    """Get the JWT verification service instance."""
    return get_app_dependencies(request).jwt_verify_service


def get_jwt_generation_service(request: Request) -> JwtGeneratorService:
    """Get the JWT generation service instance."""
    return get_app_dependencies(request).jwt_generation_service


def get_credential_service(
    db: Session = Depends(get_db_session),
    jwt_generator: JwtGeneratorService = Depends(get_jwt_generation_service),
    jwt_verifier: JwtVerificationService = Depends(get_jwt_verify_service),
) -> CredentialService:
    return CredentialService(db, jwt_generator, jwt_verifier)


def get_product_service(
    db: Session = Depends(get_db_session),
    storage: ObjectStorage = Depends(get_object_storage),
) -> ProductService:
    return ProductService(db, storage)


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header value.

    Raises:
        AuthenticationFailure: header absent (``missing_token``) or not of the
            ``Bearer <token>`` form (``malformed_header``)
    """
    if not authorization or not authorization.strip():
        raise AuthenticationFailure(
            "missing_token", "Authentication required - no token"
        )

    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme != "Bearer" or not token or " " in token:
        raise AuthenticationFailure(
            "malformed_header", "Authentication required - invalid token format"
        )
    return token


def get_current_user(
    request: Request,
    credential_service: CredentialService = Depends(get_credential_service),
) -> User:
    """Authenticate the request using a Bearer token."""
    token = extract_bearer_token(request.headers.get("Authorization"))
    user = credential_service.authenticate_token(token)
    request.state.user_id = user.id
    return user


def get_product_list_params(request: Request) -> ProductListParams:
    """Collect the recognised listing options from the query string."""
    return ProductListParams.model_validate(dict(request.query_params))


@dataclass
class ProductSubmission:
    """Product fields and optional image as sent by the client."""

    fields: dict[str, Any] = field(default_factory=dict)
    image: UploadedImage | None = None


async def _read_upload(upload: UploadFile) -> UploadedImage | None:
    data = await upload.read()
    if not data and not upload.filename:
        # browsers send an empty part when no file was picked
        return None
    return UploadedImage(
        filename=upload.filename, content_type=upload.content_type, data=data
    )


async def get_product_submission(request: Request) -> ProductSubmission:
    """Parse a product body sent as multipart, urlencoded form or JSON."""
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(_FORM_CONTENT_TYPES):
        form = await request.form()
        submission = ProductSubmission()
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key == IMAGE_FIELD:
                    submission.image = await _read_upload(value)
                continue
            submission.fields[key] = value
        return submission

    body = await request.body()
    if not body.strip():
        return ProductSubmission()

    try:
        payload = json.loads(body)
    except ValueError as e:
        raise ValidationError("Invalid JSON body") from e
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return ProductSubmission(fields=payload)


async def get_uploaded_image(request: Request) -> UploadedImage:
    """The single ``image`` file of a multipart upload request."""
    content_type = request.headers.get("content-type", "")
    image = None
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get(IMAGE_FIELD)
        if isinstance(upload, UploadFile):
            image = await _read_upload(upload)

    if image is None or not image.data:
        raise ValidationError("No file uploaded", [{"field": IMAGE_FIELD}])
    return image

"""Product API router with CRUD operations."""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.catalog.api.http.deps import (
    ProductSubmission,
    get_current_user,
    get_product_list_params,
    get_product_service,
    get_product_submission,
    get_uploaded_image,
)
from src.catalog.core.models.query import Pagination, ProductListParams
from src.catalog.core.services import ProductService, UploadedImage
from src.catalog.entities.core.user import User
from src.catalog.entities.service.product import ProductDetails

router = APIRouter(prefix="/products", tags=["products"])


class ProductListResponse(BaseModel):
    products: list[ProductDetails]
    pagination: Pagination


class ImageUploadResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    image_url: str


class MessageResponse(BaseModel):
    message: str


@router.post(
    "", response_model=ProductDetails, status_code=status.HTTP_201_CREATED
)
def create_product(
    user: User = Depends(get_current_user),
    submission: ProductSubmission = Depends(get_product_submission),
    products: ProductService = Depends(get_product_service),
) -> ProductDetails:
    """Create a product owned by the caller."""
    return products.create(user.id, submission.fields, submission.image)


@router.get("", response_model=ProductListResponse)
def list_products(
    params: ProductListParams = Depends(get_product_list_params),
    products: ProductService = Depends(get_product_service),
) -> ProductListResponse:
    """Filter, sort and paginate products. Public."""
    page = products.list_products(params)
    return ProductListResponse(products=page.items, pagination=page.pagination)


@router.post("/upload", response_model=ImageUploadResponse)
def upload_image(
    _user: User = Depends(get_current_user),
    image: UploadedImage = Depends(get_uploaded_image),
    products: ProductService = Depends(get_product_service),
) -> ImageUploadResponse:
    """Store an image ahead of creating or updating a product."""
    return ImageUploadResponse(image_url=products.upload_image(image))


@router.get("/{product_id}", response_model=ProductDetails)
def get_product(
    product_id: str,
    products: ProductService = Depends(get_product_service),
) -> ProductDetails:
    return products.get_by_id(product_id)


@router.put("/{product_id}", response_model=ProductDetails)
def update_product(
    product_id: str,
    user: User = Depends(get_current_user),
    submission: ProductSubmission = Depends(get_product_submission),
    products: ProductService = Depends(get_product_service),
) -> ProductDetails:
    """Change only the supplied fields; owner or admin only."""
    return products.update(
        product_id, user.id, user.role, submission.fields, submission.image
    )


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: str,
    user: User = Depends(get_current_user),
    products: ProductService = Depends(get_product_service),
) -> MessageResponse:
    products.delete(product_id, user.id, user.role)
    return MessageResponse(message="Product deleted successfully")

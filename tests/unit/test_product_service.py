"""Product service: validation, ownership rules and response shaping."""

import uuid
from pathlib import Path

import pytest
from sqlmodel import Session

from src.catalog.core.exceptions import (
    Forbidden,
    InvalidArgument,
    NotFound,
    ValidationError,
)
from src.catalog.core.models.query import ProductListParams
from src.catalog.core.services import ProductService, UploadedImage
from src.catalog.entities.core.user import UserTable

VALID_FIELDS = {
    "name": "Smartphone X",
    "description": "Latest model",
    "category": "Electronics",
    "price": 19.99,
    "rating": 4.5,
}


class TestCreate:
    def test_round_trip_keeps_exact_numbers(self, product_service: ProductService, owner):
        created = product_service.create(owner.id, VALID_FIELDS)
        fetched = product_service.get_by_id(created.id)

        assert fetched.price == 19.99
        assert fetched.rating == 4.5
        assert fetched.owner_id == owner.id

    def test_joins_owner_public_profile_only(self, product_service, owner):
        created = product_service.create(owner.id, VALID_FIELDS)

        assert created.owner is not None
        assert created.owner.name == owner.name
        assert created.owner.email == owner.email
        dumped = created.model_dump(by_alias=True)
        assert set(dumped["owner"]) == {"id", "name", "email"}
        assert "passwordHash" not in dumped and "password_hash" not in dumped

    def test_form_strings_are_parsed_and_trimmed(self, product_service, owner):
        created = product_service.create(
            owner.id,
            {
                "name": "  Lamp  ",
                "description": " Bright ",
                "category": "Home & Kitchen",
                "price": "12.50",
                "rating": "",
            },
        )

        assert created.name == "Lamp"
        assert created.description == "Bright"
        assert created.price == 12.5
        assert created.rating == 0

    def test_rating_defaults_to_zero(self, product_service, owner):
        fields = {k: v for k, v in VALID_FIELDS.items() if k != "rating"}
        assert product_service.create(owner.id, fields).rating == 0

    @pytest.mark.parametrize("missing", ["name", "description", "category", "price"])
    def test_required_fields(self, product_service, owner, missing):
        fields = {k: v for k, v in VALID_FIELDS.items() if k != missing}
        with pytest.raises(ValidationError) as exc_info:
            product_service.create(owner.id, fields)
        assert missing in exc_info.value.message

    @pytest.mark.parametrize(
        "override",
        [{"price": -1}, {"price": "free"}, {"rating": 5.5}, {"rating": -0.1}, {"name": "   "}],
    )
    def test_constraint_violations(self, product_service, owner, override):
        with pytest.raises(ValidationError):
            product_service.create(owner.id, {**VALID_FIELDS, **override})

    def test_owner_must_exist(self, product_service):
        with pytest.raises(ValidationError, match="Owner does not exist"):
            product_service.create(str(uuid.uuid4()), VALID_FIELDS)

    def test_image_url_field_is_kept(self, product_service, owner):
        created = product_service.create(
            owner.id, {**VALID_FIELDS, "imageUrl": "https://cdn.example.com/x.png"}
        )
        assert created.image_url == "https://cdn.example.com/x.png"

    def test_uploaded_image_wins_over_image_url(
        self, product_service, owner, local_storage, png_bytes
    ):
        image = UploadedImage("phone.png", "image/png", png_bytes)
        created = product_service.create(
            owner.id, {**VALID_FIELDS, "imageUrl": "https://cdn.example.com/x.png"}, image
        )

        assert created.image_url.startswith("/uploads/")
        assert created.image_url.endswith(".png")
        stored = Path(local_storage.directory) / created.image_url.rsplit("/", 1)[1]
        assert stored.read_bytes() == png_bytes

    def test_invalid_fields_are_rejected_before_upload(
        self, product_service, owner, local_storage, png_bytes
    ):
        image = UploadedImage("phone.png", "image/png", png_bytes)
        with pytest.raises(ValidationError):
            product_service.create(owner.id, {"name": "only a name"}, image)
        assert not local_storage.directory.exists() or not any(local_storage.directory.iterdir())


_SAMPLE_ID = "3f2b8c1e-9a4d-4e6b-8c2f-1d5e7a9b0c3d"


class TestGetById:
    @pytest.mark.parametrize(
        "product_id",
        [
            "not-an-id",
            "{" + _SAMPLE_ID + "}",
            "urn:uuid:" + _SAMPLE_ID,
            _SAMPLE_ID.upper(),
            _SAMPLE_ID.replace("-", ""),
        ],
    )
    def test_malformed_id(self, product_service, product_id):
        with pytest.raises(InvalidArgument, match="Invalid product ID format"):
            product_service.get_by_id(product_id)

    def test_missing_product(self, product_service):
        with pytest.raises(NotFound, match="Product not found"):
            product_service.get_by_id(str(uuid.uuid4()))

    def test_product_whose_owner_was_removed(self, product_service, session: Session, make_product, other_user):
        product = make_product(other_user)
        session.delete(session.get(UserTable, other_user.id))
        session.commit()

        fetched = product_service.get_by_id(product.id)
        assert fetched.owner is None
        assert fetched.owner_id == other_user.id


class TestUpdate:
    def test_owner_changes_only_supplied_fields(self, product_service, owner):
        created = product_service.create(owner.id, VALID_FIELDS)

        updated = product_service.update(
            created.id, owner.id, owner.role, {"description": "Refurbished"}
        )

        assert updated.description == "Refurbished"
        assert updated.name == created.name
        assert updated.category == created.category
        assert updated.price == created.price
        assert updated.rating == created.rating
        assert updated.image_url == created.image_url
        assert updated.owner_id == created.owner_id

    def test_null_and_blank_values_do_not_overwrite(self, product_service, owner):
        created = product_service.create(owner.id, VALID_FIELDS)

        updated = product_service.update(
            created.id, owner.id, owner.role, {"name": None, "category": "", "price": "5"}
        )

        assert updated.name == created.name
        assert updated.category == created.category
        assert updated.price == 5.0

    def test_owner_id_cannot_be_reassigned(self, product_service, owner, other_user):
        created = product_service.create(owner.id, VALID_FIELDS)

        updated = product_service.update(
            created.id, owner.id, owner.role, {"ownerId": other_user.id}
        )

        assert updated.owner_id == owner.id

    def test_non_owner_is_forbidden(self, product_service, owner, other_user):
        created = product_service.create(owner.id, VALID_FIELDS)

        with pytest.raises(Forbidden, match="Not authorized to update this product"):
            product_service.update(created.id, other_user.id, other_user.role, {"price": 1})
        assert product_service.get_by_id(created.id).price == 19.99

    def test_admin_may_update_any_product(self, product_service, owner, admin):
        created = product_service.create(owner.id, VALID_FIELDS)

        updated = product_service.update(created.id, admin.id, admin.role, {"rating": 1})

        assert updated.rating == 1
        assert updated.owner_id == owner.id

    def test_updated_fields_are_validated(self, product_service, owner):
        created = product_service.create(owner.id, VALID_FIELDS)

        with pytest.raises(ValidationError):
            product_service.update(created.id, owner.id, owner.role, {"rating": 9})

    def test_missing_product(self, product_service, owner):
        with pytest.raises(NotFound):
            product_service.update(str(uuid.uuid4()), owner.id, owner.role, {"price": 1})

    def test_uploaded_image_replaces_url(self, product_service, owner, png_bytes):
        created = product_service.create(owner.id, VALID_FIELDS)

        updated = product_service.update(
            created.id,
            owner.id,
            owner.role,
            {"imageUrl": "https://cdn.example.com/ignored.png"},
            UploadedImage("new.png", "image/png", png_bytes),
        )

        assert updated.image_url.startswith("/uploads/")


class TestDelete:
    def test_owner_deletes_permanently(self, product_service, owner):
        created = product_service.create(owner.id, VALID_FIELDS)

        product_service.delete(created.id, owner.id, owner.role)

        with pytest.raises(NotFound):
            product_service.get_by_id(created.id)

    def test_missing_product(self, product_service, owner):
        with pytest.raises(NotFound):
            product_service.delete(str(uuid.uuid4()), owner.id, owner.role)

    def test_malformed_id(self, product_service, owner):
        with pytest.raises(InvalidArgument):
            product_service.delete("123", owner.id, owner.role)

    def test_non_owner_is_forbidden(self, product_service, owner, other_user):
        created = product_service.create(owner.id, VALID_FIELDS)

        with pytest.raises(Forbidden, match="Not authorized to delete this product"):
            product_service.delete(created.id, other_user.id, other_user.role)
        assert product_service.get_by_id(created.id).id == created.id

    def test_admin_may_delete_any_product(self, product_service, owner, admin):
        created = product_service.create(owner.id, VALID_FIELDS)

        product_service.delete(created.id, admin.id, admin.role)

        with pytest.raises(NotFound):
            product_service.get_by_id(created.id)


class TestList:
    def test_pagination_summary(self, product_service, make_product, owner):
        for i in range(25):
            make_product(owner, name=f"Item {i:02d}", price=float(i))

        page = product_service.list_products(
            ProductListParams.model_validate({"page": "3", "limit": "10"})
        )

        assert len(page.items) == 5
        assert page.pagination.total == 25
        assert page.pagination.page == 3
        assert page.pagination.limit == 10
        assert page.pagination.total_pages == 3

    def test_total_matches_filter_not_window(self, product_service, make_product, owner):
        for i in range(4):
            make_product(owner, name=f"Book {i}", category="Books")
        make_product(owner, name="Toy", category="Toys")

        page = product_service.list_products(
            ProductListParams.model_validate({"category": "Books", "limit": "3"})
        )

        assert page.pagination.total == 4
        assert len(page.items) == 3
        assert all(item.category == "Books" for item in page.items)

    def test_empty_listing(self, product_service):
        page = product_service.list_products(ProductListParams())

        assert page.items == []
        assert page.pagination.total == 0
        assert page.pagination.total_pages == 0

    def test_items_carry_owner_profile(self, product_service, make_product, owner):
        make_product(owner)

        page = product_service.list_products(ProductListParams())

        assert page.items[0].owner.email == owner.email

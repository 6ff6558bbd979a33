"""Entities grouped by business concept.

Each entity package holds:
- entity.py: domain model
- table.py: database persistence model
- repository.py: data access layer
"""

from .core.user import OwnerProfile, User, UserRepository, UserTable
from .service.product import (
    Product,
    ProductCreate,
    ProductDetails,
    ProductRepository,
    ProductTable,
    ProductUpdate,
)

__all__ = [
    "OwnerProfile",
    "User",
    "UserTable",
    "UserRepository",
    "Product",
    "ProductCreate",
    "ProductDetails",
    "ProductUpdate",
    "ProductTable",
    "ProductRepository",
]

"""Entity package: Product."""

from .entity import Product, ProductCreate, ProductDetails, ProductUpdate
from .repository import ProductRepository
from .table import ProductTable

__all__ = [
    "Product",
    "ProductCreate",
    "ProductDetails",
    "ProductUpdate",
    "ProductRepository",
    "ProductTable",
]

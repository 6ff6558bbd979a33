"""Core data models for the catalog API."""

from .query import Pagination, ProductListParams, ProductQueryPlan

__all__ = ["Pagination", "ProductListParams", "ProductQueryPlan"]

"""
Repository Pattern for Database Operations

- CatalogRepository: products, sizes, toppings (read-only)
"""
from .catalog_repo import CatalogRepository

__all__ = [
    "CatalogRepository",
]

from .base import BaseRepository
from .cart_repository import CartRepository, InMemoryCartRepository
from .product_repository import ProductCatalog, InMemoryProductCatalog

__all__ = [
    "BaseRepository",
    "CartRepository", "InMemoryCartRepository",
    "ProductCatalog", "InMemoryProductCatalog",
]

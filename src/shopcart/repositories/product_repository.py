from abc import abstractmethod
from typing import Dict, Iterable, List, Optional

from shopcart.models.product import Product
from shopcart.repositories.base import BaseRepository


class ProductCatalog(BaseRepository[Product]):
    """Read-only product lookup used to validate and snapshot cart lines"""

    def lookup(self, product_id: str) -> Optional[Product]:
        return self.get_by_id(product_id)

    @abstractmethod
    def list_by_category(self, category: str) -> List[Product]:
        pass

    @abstractmethod
    def search(self, query: str) -> List[Product]:
        pass


class InMemoryProductCatalog(ProductCatalog):
    """Catalog backed by a fixed list of products, keyed by product ID"""

    def __init__(self, products: Iterable[Product]):
        self._products: Dict[str, Product] = {}
        for product in products:
            if product.id in self._products:
                raise ValueError(f"Duplicate product ID: {product.id}")
            self._products[product.id] = product

    def get_by_id(self, product_id: str) -> Optional[Product]:
        return self._products.get(product_id)

    def list_all(self) -> List[Product]:
        return list(self._products.values())

    def list_by_category(self, category: str) -> List[Product]:
        wanted = category.strip().lower()
        return [p for p in self._products.values() if p.category.lower() == wanted]

    def search(self, query: str) -> List[Product]:
        """Case-insensitive substring match on name and category"""
        term = query.strip().lower()
        if not term:
            return self.list_all()
        return [
            p for p in self._products.values()
            if term in p.name.lower() or term in p.category.lower()
        ]

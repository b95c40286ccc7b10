from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict

from shopcart.utils.formatting_utils import FormattingUtils


@dataclass(frozen=True)
class Product:
    """A catalog entry. Read-only to the cart store."""
    id: str
    name: str
    price: Decimal
    stock: int  # Informational limit, never decremented
    image: str
    slug: str = ""
    category: str = ""

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "category": self.category,
            "price": FormattingUtils.money_string(self.price),
            "stock": self.stock,
            "in_stock": self.in_stock,
            "image": self.image,
        }

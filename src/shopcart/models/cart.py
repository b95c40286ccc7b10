import copy
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Dict, Any

from shopcart.utils.date_utils import DateUtils
from shopcart.utils.formatting_utils import FormattingUtils


@dataclass
class CartItem:
    """Represents one product line in a shopping cart"""
    id: str
    product_id: str
    name: str
    price: Decimal  # Price at time of adding to cart
    quantity: int
    image: str
    max_quantity: int  # Catalog stock at time of adding to cart

    @property
    def subtotal(self) -> Decimal:
        """Line total"""
        return self.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "product_id": self.product_id,
            "name": self.name,
            "price": FormattingUtils.money_string(self.price),
            "quantity": self.quantity,
            "image": self.image,
            "max_quantity": self.max_quantity,
            "subtotal": FormattingUtils.money_string(self.subtotal),
        }


@dataclass
class Cart:
    """Represents a shopping cart, owned by a user or by nobody (guest)"""
    id: str
    user_id: Optional[str] = None
    items: List[CartItem] = field(default_factory=list)
    total: Decimal = Decimal("0")
    item_count: int = 0
    created_at: datetime = field(default_factory=DateUtils.now_utc)
    updated_at: datetime = field(default_factory=DateUtils.now_utc)

    @property
    def is_empty(self) -> bool:
        """Check if cart is empty"""
        return len(self.items) == 0

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    def get_item_by_product(self, product_id: str) -> Optional[CartItem]:
        """Find cart item by product ID"""
        return next((item for item in self.items if item.product_id == product_id), None)

    def get_item_by_id(self, item_id: str) -> Optional[CartItem]:
        """Find cart item by cart item ID"""
        return next((item for item in self.items if item.id == item_id), None)

    def index_of(self, item_id: str) -> int:
        """Position of an item, or -1"""
        return next((i for i, item in enumerate(self.items) if item.id == item_id), -1)

    def recompute_totals(self) -> None:
        """
        Derive total and item_count from the current lines and stamp updated_at.

        Always a full recomputation; the totals are never adjusted incrementally.
        """
        self.total = sum((item.subtotal for item in self.items), Decimal("0"))
        self.item_count = sum(item.quantity for item in self.items)
        self.updated_at = DateUtils.now_utc()

    def snapshot(self) -> "Cart":
        """Detached copy handed out to callers"""
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "items": [item.to_dict() for item in self.items],
            "total": FormattingUtils.money_string(self.total),
            "item_count": self.item_count,
            "is_empty": self.is_empty,
            "created_at": DateUtils.to_iso_string(self.created_at),
            "updated_at": DateUtils.to_iso_string(self.updated_at),
        }


class OperationType(str, Enum):
    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"
    CLEAR = "clear"
    MERGE = "merge"


@dataclass(frozen=True)
class CartOperation:
    """One entry of a cart's mutation history"""
    type: OperationType
    product_id: Optional[str] = None
    quantity: Optional[int] = None
    timestamp: datetime = field(default_factory=DateUtils.now_utc)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "timestamp": DateUtils.to_iso_string(self.timestamp),
        }

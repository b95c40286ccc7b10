from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from shopcart.models.cart import Cart, CartItem, CartOperation
from shopcart.models.product import Product
from shopcart.services.cart_service import CartStats
from shopcart.utils.formatting_utils import FormattingUtils


class CartItemResponse(BaseModel):
    """Cart line in API responses"""
    id: str = Field(description="Unique cart item identifier")
    product_id: str = Field(description="Catalog product identifier")
    name: str = Field(description="Product name when added to cart")
    price: str = Field(description="Unit price when added to cart")
    quantity: int = Field(ge=1, description="Quantity in cart")
    image: str = Field(description="Product image URL")
    max_quantity: int = Field(ge=1, description="Stock limit when added to cart")
    subtotal: str = Field(description="Line item subtotal")

    @classmethod
    def from_item(cls, item: CartItem) -> "CartItemResponse":
        return cls(**item.to_dict())


class CartResponse(BaseModel):
    """Complete cart information"""
    id: str = Field(description="Unique cart identifier")
    user_id: Optional[str] = Field(default=None, description="Owning user, absent for guest carts")
    items: List[CartItemResponse] = Field(description="Cart lines in insertion order")
    total: str = Field(description="Sum of price x quantity over all lines")
    item_count: int = Field(ge=0, description="Sum of quantities over all lines")
    is_empty: bool = Field(description="Whether cart is empty")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": "cart_3_5f0c2a9b1d7e",
            "user_id": "3",
            "items": [
                {
                    "id": "item_9b2f0c...",
                    "product_id": "1",
                    "name": "Premium Wireless Headphones",
                    "price": "299.99",
                    "quantity": 2,
                    "image": "https://picsum.photos/100/100?random=1",
                    "max_quantity": 10,
                    "subtotal": "599.98"
                }
            ],
            "total": "599.98",
            "item_count": 2,
            "is_empty": False,
            "created_at": "2026-01-03T10:30:00+00:00",
            "updated_at": "2026-01-03T10:31:12+00:00"
        }
    })

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartResponse":
        return cls(**cart.to_dict())


class CartOperationResponse(BaseModel):
    type: str
    product_id: Optional[str] = None
    quantity: Optional[int] = None
    timestamp: datetime

    @classmethod
    def from_operation(cls, operation: CartOperation) -> "CartOperationResponse":
        return cls(**operation.to_dict())


class CartStatsResponse(BaseModel):
    total_carts: int = Field(ge=0)
    guest_carts: int = Field(ge=0)
    user_carts: int = Field(ge=0)
    total_items: int = Field(ge=0)
    total_value: str
    average_cart_value: str

    @classmethod
    def from_stats(cls, stats: CartStats) -> "CartStatsResponse":
        return cls(
            total_carts=stats.total_carts,
            guest_carts=stats.guest_carts,
            user_carts=stats.user_carts,
            total_items=stats.total_items,
            total_value=FormattingUtils.money_string(stats.total_value),
            average_cart_value=FormattingUtils.money_string(stats.average_cart_value),
        )


class ProductResponse(BaseModel):
    """Catalog entry in API responses"""
    id: str
    name: str
    slug: str
    category: str
    price: str
    stock: int = Field(ge=0)
    in_stock: bool
    image: str

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(**product.to_dict())

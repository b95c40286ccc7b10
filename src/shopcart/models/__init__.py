from .product import Product
from .cart import Cart, CartItem, CartOperation, OperationType
from .user import User

__all__ = [
    "Product",
    "Cart", "CartItem", "CartOperation", "OperationType",
    "User",
]

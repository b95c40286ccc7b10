from .cart_service import CartService, CartResult, CartStats
from .user_service import DemoUserDirectory

__all__ = ["CartService", "CartResult", "CartStats", "DemoUserDirectory"]

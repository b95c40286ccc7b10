from shopcart.routes.cart import cart_bp
from shopcart.routes.products import products_bp

__all__ = ["cart_bp", "products_bp"]

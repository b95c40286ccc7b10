"""
Demo data for the in-memory stores.

The catalog mirrors the sample shop: four electronics items and six from
clothing and home. Stock figures are informational limits only.
"""

from decimal import Decimal
from typing import List

from shopcart.models.product import Product
from shopcart.models.user import User


def _image(n: int, size: int = 100) -> str:
    return f"https://picsum.photos/{size}/{size}?random={n}"


def demo_products() -> List[Product]:
    return [
        Product("1", "Premium Wireless Headphones", Decimal("299.99"), 10, _image(1),
                slug="premium-wireless-headphones", category="electronics"),
        Product("2", "Smart Fitness Watch", Decimal("199.99"), 5, _image(2),
                slug="smart-fitness-watch", category="electronics"),
        Product("3", "Bluetooth Speaker", Decimal("89.99"), 15, _image(3),
                slug="bluetooth-speaker", category="electronics"),
        Product("4", "Wireless Mouse", Decimal("49.99"), 20, _image(4),
                slug="wireless-mouse", category="electronics"),
        Product("5", "Cotton T-Shirt", Decimal("24.99"), 25, _image(5, 300),
                slug="cotton-t-shirt", category="clothing"),
        Product("6", "Denim Jeans", Decimal("79.99"), 18, _image(6, 300),
                slug="denim-jeans", category="clothing"),
        Product("7", "Sneakers", Decimal("119.99"), 12, _image(7, 300),
                slug="sneakers", category="clothing"),
        Product("8", "Coffee Maker", Decimal("159.99"), 12, _image(8, 300),
                slug="coffee-maker", category="home"),
        Product("9", "Table Lamp", Decimal("45.99"), 8, _image(9, 300),
                slug="table-lamp", category="home"),
        Product("10", "Throw Pillow", Decimal("19.99"), 35, _image(10, 300),
                slug="throw-pillow", category="home"),
    ]


def demo_users() -> List[User]:
    return [
        User("1", "Admin User", "admin@example.com"),
        User("2", "Manager User", "manager@example.com"),
        User("3", "Regular User", "user@example.com"),
    ]

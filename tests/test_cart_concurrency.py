"""
Concurrency tests for CartService

Many threads hit one cart at once; per-cart serialization must keep the
line count, quantities and totals consistent.
"""
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from shopcart.core.config import CartConfig
from shopcart.services.cart_service import CartService


def test_concurrent_adds_of_new_product_produce_one_line(cart_service, cart):
    # Product "10" has stock 35
    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda _: cart_service.add_item(cart.id, "10", 1), range(50)))

    succeeded = sum(1 for r in results if r.success)
    stored = cart_service.get_cart(cart.id)

    assert succeeded == 35
    assert len(stored.items) == 1
    assert stored.items[0].quantity == 35
    assert stored.item_count == 35
    assert stored.total == Decimal("19.99") * 35


def test_concurrent_first_access_yields_single_cart(cart_repo, catalog, user):
    service = CartService(cart_repo, catalog, CartConfig(simulated_latency_ms=1))

    with ThreadPoolExecutor(max_workers=8) as pool:
        carts = list(pool.map(lambda _: service.get_or_create_user_cart(user), range(20)))

    assert len({c.id for c in carts}) == 1
    assert len(cart_repo.list_all()) == 1


def test_concurrent_guest_merges_into_one_cart(cart_service, cart):
    guests = [cart_service.create_guest_cart() for _ in range(6)]
    for guest in guests:
        cart_service.add_item(guest.id, "5", 1)

    with ThreadPoolExecutor(max_workers=6) as pool:
        results = list(pool.map(lambda g: cart_service.merge_carts(g.id, cart.id), guests))

    assert all(r.success for r in results)
    assert cart_service.get_cart(cart.id).items[0].quantity == 6

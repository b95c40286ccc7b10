from datetime import datetime, timezone
from decimal import Decimal

from shopcart.models.cart import Cart, CartItem, CartOperation, OperationType
from shopcart.schemas.cart_schemas import CartResponse
from shopcart.utils.formatting_utils import FormattingUtils


def make_item(item_id="item_1", product_id="1", price="299.99", quantity=2, max_quantity=10):
    return CartItem(
        id=item_id,
        product_id=product_id,
        name="Premium Wireless Headphones",
        price=Decimal(price),
        quantity=quantity,
        image="https://picsum.photos/100/100?random=1",
        max_quantity=max_quantity,
    )


class TestCart:

    def test_recompute_totals_is_full_derivation(self):
        cart = Cart(id="cart_1", items=[make_item(), make_item("item_2", "4", "49.99", 3)])
        cart.total = Decimal("12345")  # stale value must be discarded
        cart.item_count = 1

        cart.recompute_totals()

        assert cart.total == Decimal("749.95")
        assert cart.item_count == 5

    def test_recompute_stamps_updated_at(self):
        old = datetime(2020, 1, 1, tzinfo=timezone.utc)
        cart = Cart(id="cart_1", created_at=old, updated_at=old)

        cart.recompute_totals()

        assert cart.updated_at > old
        assert cart.created_at == old

    def test_lookup_helpers(self):
        cart = Cart(id="cart_1", items=[make_item(), make_item("item_2", "4")])

        assert cart.get_item_by_product("4").id == "item_2"
        assert cart.get_item_by_id("item_1").product_id == "1"
        assert cart.get_item_by_id("nope") is None
        assert cart.index_of("item_2") == 1
        assert cart.index_of("nope") == -1

    def test_to_dict_renders_money_as_strings(self):
        cart = Cart(id="cart_1", user_id="3", items=[make_item()])
        cart.recompute_totals()

        data = cart.to_dict()

        assert data["total"] == "599.98"
        assert data["item_count"] == 2
        assert data["items"][0]["price"] == "299.99"
        assert data["items"][0]["subtotal"] == "599.98"
        assert data["is_empty"] is False

    def test_snapshot_is_deep_copy(self):
        cart = Cart(id="cart_1", items=[make_item()])

        copy = cart.snapshot()
        copy.items[0].quantity = 7

        assert cart.items[0].quantity == 2


def test_operation_to_dict():
    op = CartOperation(type=OperationType.CLEAR)

    data = op.to_dict()

    assert data["type"] == "clear"
    assert data["product_id"] is None


def test_money_formatting():
    assert FormattingUtils.money_string(0) == "0.00"
    assert FormattingUtils.money_string(299.99) == "299.99"
    assert FormattingUtils.format_money(Decimal("1299.5")) == "$1,299.50"


def test_cart_response_matches_model_rendering():
    cart = Cart(id="cart_1", user_id="3", items=[make_item()])
    cart.recompute_totals()

    payload = CartResponse.from_cart(cart).model_dump(mode="json")
    data = cart.to_dict()

    assert payload["total"] == data["total"] == "599.98"
    assert payload["items"] == data["items"]
    assert payload["user_id"] == "3"

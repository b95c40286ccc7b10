import logging

from flask import Blueprint, request
from marshmallow import ValidationError as SchemaValidationError

from shopcart.core.config import Config
from shopcart.core.exceptions import NotFoundError, ValidationError
from shopcart.routes.schemas import AddCartItemSchema, MergeCartSchema, UpdateCartItemSchema
from shopcart.routes.utils import (
    cart_failure_response,
    get_current_user,
    get_service,
    parse_int,
    request_payload,
    success_response,
)
from shopcart.schemas.cart_schemas import (
    CartOperationResponse,
    CartResponse,
    CartStatsResponse,
)
from shopcart.services.cart_service import CartResult, CartService

logger = logging.getLogger(__name__)

cart_bp = Blueprint("cart", __name__)

_update_schema = UpdateCartItemSchema()
_merge_schema = MergeCartSchema()


def _load(schema, data):
    try:
        return schema.load(data)
    except SchemaValidationError as err:
        raise ValidationError(
            "Invalid request",
            field_errors=[
                {"field": name, "message": "; ".join(messages)}
                for name, messages in err.normalized_messages().items()
            ],
        )


def _cart_payload(cart):
    return CartResponse.from_cart(cart).model_dump(mode="json")


def _respond(result: CartResult, message: str):
    if not result.success:
        return cart_failure_response(result)
    return success_response(_cart_payload(result.cart), message)


def _add_item(cart_id: str):
    max_quantity = get_service(Config).api.max_quantity_per_request
    data = _load(AddCartItemSchema(max_quantity=max_quantity), request_payload())
    result = get_service(CartService).add_item(cart_id, data["product_id"], data["quantity"])
    return _respond(result, f"Added {data['quantity']} item(s) to your cart!")


@cart_bp.route("/me", methods=["GET"])
def get_my_cart():
    """Return the current user's cart, creating it if it doesn't exist."""
    user = get_current_user()
    cart = get_service(CartService).get_or_create_user_cart(user)
    return success_response(_cart_payload(cart))


@cart_bp.route("/me/items", methods=["POST"])
def add_cart_item():
    """Add a product to the cart, or increment quantity if already present."""
    user = get_current_user()
    cart = get_service(CartService).get_or_create_user_cart(user)
    return _add_item(cart.id)


@cart_bp.route("/me/items/<item_id>", methods=["PATCH"])
def update_cart_item(item_id: str):
    """Update the quantity of a cart item. Setting quantity to 0 removes it."""
    user = get_current_user()
    data = _load(_update_schema, request_payload())
    carts = get_service(CartService)
    cart = carts.get_or_create_user_cart(user)
    result = carts.update_item_quantity(cart.id, item_id, data["quantity"])
    message = "Item removed from cart." if data["quantity"] <= 0 else "Cart updated."
    return _respond(result, message)


@cart_bp.route("/me/items/<item_id>", methods=["DELETE"])
def delete_cart_item(item_id: str):
    """Remove an item from the cart."""
    user = get_current_user()
    carts = get_service(CartService)
    cart = carts.get_or_create_user_cart(user)
    return _respond(carts.remove_item(cart.id, item_id), "Item removed from cart.")


@cart_bp.route("/me", methods=["DELETE"])
def clear_my_cart():
    """Remove every item from the cart."""
    user = get_current_user()
    carts = get_service(CartService)
    cart = carts.get_or_create_user_cart(user)
    return _respond(carts.clear_cart(cart.id), "Cart cleared successfully.")


@cart_bp.route("/me/history", methods=["GET"])
def get_my_cart_history():
    """Recent operations on the current user's cart."""
    user = get_current_user()
    limit = parse_int(request.args.get("limit"), default=None, min_val=1, max_val=50, field_name="limit")
    carts = get_service(CartService)
    cart = carts.get_or_create_user_cart(user)
    operations = carts.get_operations(cart.id, limit)
    return success_response(
        [CartOperationResponse.from_operation(op).model_dump(mode="json") for op in operations]
    )


@cart_bp.route("/me/merge", methods=["POST"])
def merge_guest_cart():
    """Move a guest cart's items into the current user's cart."""
    user = get_current_user()
    data = _load(_merge_schema, request_payload())
    carts = get_service(CartService)
    cart = carts.get_or_create_user_cart(user)
    result = carts.merge_carts(data["guest_cart_id"], cart.id)
    return _respond(result, "Guest cart merged.")


@cart_bp.route("/guest", methods=["POST"])
def create_guest_cart():
    """Start a cart for a visitor who has not logged in."""
    cart = get_service(CartService).create_guest_cart()
    return success_response(_cart_payload(cart), "Guest cart created.", 201)


@cart_bp.route("/guest/<cart_id>", methods=["GET"])
def get_guest_cart(cart_id: str):
    cart = get_service(CartService).get_cart(cart_id)
    if cart is None or not cart.is_guest:
        raise NotFoundError("Cart", cart_id)
    return success_response(_cart_payload(cart))


@cart_bp.route("/guest/<cart_id>/items", methods=["POST"])
def add_guest_cart_item(cart_id: str):
    cart = get_service(CartService).get_cart(cart_id)
    if cart is None or not cart.is_guest:
        raise NotFoundError("Cart", cart_id)
    return _add_item(cart_id)


@cart_bp.route("/stats", methods=["GET"])
def get_cart_stats():
    """Store-wide cart statistics."""
    stats = get_service(CartService).get_stats()
    return success_response(CartStatsResponse.from_stats(stats).model_dump(mode="json"))

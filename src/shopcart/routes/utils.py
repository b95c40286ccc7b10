from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type, TypeVar

from flask import current_app, jsonify, request

from shopcart.core.dependencies import DependencyContainer
from shopcart.core.exceptions import UnauthorizedError, ValidationError
from shopcart.models.user import User
from shopcart.services.cart_service import CartResult
from shopcart.services.user_service import DemoUserDirectory

T = TypeVar("T")


def success_response(data, message: Optional[str] = None, status: int = 200):
    """Consistent success response envelope."""
    response = {
        "success": True,
        "data": data,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if message:
        response["message"] = message
    return jsonify(response), status


def error_response(
    code: str,
    message: str,
    status: int = 400,
    details: Optional[Dict[str, Any]] = None,
):
    """Consistent error response envelope."""
    return jsonify({
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
        },
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }), status


def cart_failure_response(result: CartResult):
    """A rejected cart mutation is always the client's problem: 400."""
    details = {"available": result.available} if result.available is not None else None
    return error_response(result.error_code or "CART_ERROR", result.error or "Cart update failed", 400, details)


def parse_int(
    v,
    default=None,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
    field_name: str = "value",
) -> Optional[int]:
    """Parse an integer with optional range validation."""
    if v is None:
        return default
    try:
        result = int(v)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}: must be a valid integer")
    if min_val is not None and result < min_val:
        raise ValidationError(f"{field_name} must be at least {min_val}")
    if max_val is not None and result > max_val:
        raise ValidationError(f"{field_name} cannot exceed {max_val}")
    return result


def request_payload() -> Dict[str, Any]:
    """Body of a JSON or form submission as a plain dict."""
    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data
    return request.form.to_dict()


def get_service(service_class: Type[T]) -> T:
    container: DependencyContainer = current_app.extensions["shopcart"]
    return container.get(service_class)


def get_current_user() -> User:
    """Resolve the X-User-Id request header to a known user."""
    uid = request.headers.get("X-User-Id")
    if not uid:
        raise UnauthorizedError("Please login to use your cart")
    user = get_service(DemoUserDirectory).get_user(uid)
    if user is None:
        raise UnauthorizedError("Unknown user")
    return user

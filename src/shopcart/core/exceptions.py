from typing import Optional, Dict, Any, List


class BaseAPIException(Exception):
    """
    An error the HTTP layer knows how to answer.

    The app-level handler renders `error_code`, `message` and `details` into
    the JSON error envelope with `status_code`.
    """

    def __init__(self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        internal_message: Optional[str] = None):
        self.message = message  # Shown to the client
        self.internal_message = internal_message or message  # Logged only
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__.replace('Error', '').upper()
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BaseAPIException):
    """Raised when a request body or query parameter is malformed"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[List[Dict[str, str]]] = None
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, 400, "VALIDATION_ERROR", details)


class NotFoundError(BaseAPIException):
    """Raised when a catalog entry or guest cart addressed by URL does not exist"""

    def __init__(self, resource: str = "Resource", resource_id: Optional[str] = None):
        message = f"{resource} not found"
        if resource_id:
            message += f" with ID: {resource_id}"
        super().__init__(message, 404, "NOT_FOUND")


class UnauthorizedError(BaseAPIException):
    """Raised when the request carries no known user"""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, 401, "UNAUTHORIZED")


class BusinessLogicError(BaseAPIException):
    """Raised when a cart rule rejects an otherwise well-formed request"""

    def __init__(self, message: str, rule: Optional[str] = None, status_code: int = 422):
        details = {"violated_rule": rule} if rule else {}
        super().__init__(message, status_code, "BUSINESS_LOGIC_ERROR", details)


class CartError(BusinessLogicError):
    """
    Base class for cart store failures.

    The cart store never lets these escape: they are converted into a failed
    CartResult, and the route layer answers them with 400.
    """

    rule = "cart_error"

    def __init__(self, message: str):
        super().__init__(message, rule=self.rule, status_code=400)
        self.error_code = self.rule.upper()


class CartNotFoundError(CartError):
    rule = "cart_not_found"

    def __init__(self, cart_id: Optional[str] = None):
        super().__init__("Cart not found")
        if cart_id:
            self.details["cart_id"] = cart_id


class ProductNotFoundError(CartError):
    rule = "product_not_found"

    def __init__(self, product_id: Optional[str] = None):
        super().__init__("Product not found")
        if product_id:
            self.details["product_id"] = product_id


class ItemNotFoundError(CartError):
    rule = "item_not_found"

    def __init__(self, item_id: Optional[str] = None):
        super().__init__("Item not found in cart")
        if item_id:
            self.details["item_id"] = item_id


class InsufficientStockError(CartError):
    rule = "insufficient_stock"

    def __init__(self, available: int):
        super().__init__(f"Only {available} items available")
        self.available = available
        self.details["available"] = available


class InvalidQuantityError(CartError):
    rule = "invalid_quantity"

    def __init__(self, quantity: int):
        super().__init__("Quantity must be at least 1")
        self.details["quantity"] = quantity


class CartEmptyError(CartError):
    rule = "cart_empty"

    def __init__(self, cart_id: Optional[str] = None):
        super().__init__("Nothing to merge")
        if cart_id:
            self.details["cart_id"] = cart_id


class InvalidMergeError(CartError):
    rule = "invalid_merge"

    def __init__(self, message: str = "Cannot merge a cart into itself"):
        super().__init__(message)

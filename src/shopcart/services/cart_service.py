import threading
import time
import uuid
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from typing import Deque, Dict, Iterator, List, Optional

from shopcart.core.config import CartConfig
from shopcart.core.exceptions import (
    CartError, CartNotFoundError, ProductNotFoundError, ItemNotFoundError,
    InsufficientStockError, InvalidQuantityError, CartEmptyError, InvalidMergeError
)
from shopcart.models.cart import Cart, CartItem, CartOperation, OperationType
from shopcart.models.user import User
from shopcart.repositories.cart_repository import CartRepository
from shopcart.repositories.product_repository import ProductCatalog
from shopcart.utils.date_utils import DateUtils
from shopcart.utils.formatting_utils import FormattingUtils
import logging

logger = logging.getLogger(__name__)


@dataclass
class CartResult:
    """Outcome of a cart mutation: the updated cart, or why nothing changed"""
    success: bool
    cart: Optional[Cart] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    available: Optional[int] = None

    @classmethod
    def ok(cls, cart: Cart) -> "CartResult":
        return cls(success=True, cart=cart)

    @classmethod
    def failure(cls, error: CartError) -> "CartResult":
        return cls(
            success=False,
            error=error.message,
            error_code=error.error_code,
            available=getattr(error, "available", None),
        )


@dataclass
class CartStats:
    total_carts: int
    guest_carts: int
    user_carts: int
    total_items: int
    total_value: Decimal
    average_cart_value: Decimal


class CartService:
    """
    Shopping cart store

    Responsibilities:
    - Create user and guest carts lazily
    - Add, update, remove and clear cart lines against the product catalog
    - Keep cart totals derived from the lines
    - Serialize mutations per cart and hand out detached snapshots

    Business failures never raise: every mutation returns a CartResult.
    """

    def __init__(
        self,
        cart_repository: CartRepository,
        product_catalog: ProductCatalog,
        cart_config: Optional[CartConfig] = None,
    ):
        cart_config = cart_config or CartConfig()
        self.cart_repo = cart_repository
        self.catalog = product_catalog
        self.latency_seconds = cart_config.simulated_latency_ms / 1000
        self.history_size = cart_config.operation_history_size
        self.default_history_limit = cart_config.default_history_limit
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._operations: Dict[str, Deque[CartOperation]] = {}

    def get_cart(self, cart_id: str) -> Optional[Cart]:
        """Snapshot of a cart, or None if the ID is unknown"""
        self._simulate_latency()
        return self._snapshot(cart_id)

    def get_or_create_user_cart(self, user: User) -> Cart:
        """
        Get the user's cart, creating an empty one on first access

        The repository's user index makes lookup-and-create atomic, so
        concurrent first requests for one user still share a single cart.
        """
        self._simulate_latency()
        cart, created = self.cart_repo.get_or_create_for_user(
            user.id, lambda: self._new_cart(user_id=user.id)
        )
        if created:
            logger.info(f"Created cart {cart.id} for user {user.id}")
        with self._cart_lock(cart.id):
            return cart.snapshot()

    def create_guest_cart(self) -> Cart:
        """Create a cart with no owner"""
        self._simulate_latency()
        cart = self.cart_repo.put(self._new_cart())
        logger.info(f"Created guest cart {cart.id}")
        return cart.snapshot()

    def add_item(self, cart_id: str, product_id: str, quantity: int = 1) -> CartResult:
        """
        Add a product to the cart, or increase the quantity of its existing line

        Business Rules:
        - Product must exist in the catalog
        - Requested quantity must be at least 1
        - Resulting line quantity may not exceed catalog stock
        - New lines snapshot name, price, image and stock (as max_quantity)
        """
        logger.info(f"Adding to cart {cart_id} - product: {product_id}, quantity: {quantity}")
        self._simulate_latency()

        try:
            with self._cart_lock(cart_id):
                cart = self._require_cart(cart_id)
                product = self.catalog.lookup(product_id)
                if product is None:
                    raise ProductNotFoundError(product_id)
                if quantity < 1:
                    raise InvalidQuantityError(quantity)

                existing_item = cart.get_item_by_product(product_id)
                if existing_item:
                    new_quantity = existing_item.quantity + quantity
                    if new_quantity > product.stock:
                        raise InsufficientStockError(product.stock)
                    existing_item.quantity = new_quantity
                else:
                    if quantity > product.stock:
                        raise InsufficientStockError(product.stock)
                    cart.items.append(CartItem(
                        id=self._new_item_id(),
                        product_id=product.id,
                        name=product.name,
                        price=product.price,
                        quantity=quantity,
                        image=product.image,
                        max_quantity=product.stock,
                    ))

                cart.recompute_totals()
                self._record(cart.id, OperationType.ADD, product_id, quantity)
                result = CartResult.ok(cart.snapshot())
        except CartError as e:
            logger.warning(f"Add to cart {cart_id} rejected: {e.message}")
            return CartResult.failure(e)

        logger.info(f"Cart {cart_id} now holds {result.cart.item_count} items, total {FormattingUtils.format_money(result.cart.total)}")
        return result

    def update_item_quantity(self, cart_id: str, item_id: str, quantity: int) -> CartResult:
        """
        Set the quantity of a cart line

        Business Rules:
        - Quantity 0 or below removes the line
        - Quantity is capped by the line's max_quantity snapshot, not live stock
        """
        logger.info(f"Updating item {item_id} in cart {cart_id} to quantity {quantity}")
        self._simulate_latency()

        try:
            with self._cart_lock(cart_id):
                cart = self._require_cart(cart_id)
                item = cart.get_item_by_id(item_id)
                if item is None:
                    raise ItemNotFoundError(item_id)

                if quantity <= 0:
                    self._remove_line(cart, item_id)
                    return CartResult.ok(cart.snapshot())

                if quantity > item.max_quantity:
                    raise InsufficientStockError(item.max_quantity)

                item.quantity = quantity
                cart.recompute_totals()
                self._record(cart.id, OperationType.UPDATE, item.product_id, quantity)
                return CartResult.ok(cart.snapshot())
        except CartError as e:
            logger.warning(f"Update of item {item_id} in cart {cart_id} rejected: {e.message}")
            return CartResult.failure(e)

    def remove_item(self, cart_id: str, item_id: str) -> CartResult:
        """Remove a line from the cart, keeping the order of the rest"""
        logger.info(f"Removing item {item_id} from cart {cart_id}")
        self._simulate_latency()

        try:
            with self._cart_lock(cart_id):
                cart = self._require_cart(cart_id)
                self._remove_line(cart, item_id)
                return CartResult.ok(cart.snapshot())
        except CartError as e:
            logger.warning(f"Removal of item {item_id} from cart {cart_id} rejected: {e.message}")
            return CartResult.failure(e)

    def clear_cart(self, cart_id: str) -> CartResult:
        """Remove all lines. Clearing an empty cart succeeds"""
        logger.info(f"Clearing cart {cart_id}")
        self._simulate_latency()

        try:
            with self._cart_lock(cart_id):
                cart = self._require_cart(cart_id)
                cart.items = []
                cart.recompute_totals()
                self._record(cart.id, OperationType.CLEAR)
                return CartResult.ok(cart.snapshot())
        except CartError as e:
            logger.warning(f"Clearing cart {cart_id} rejected: {e.message}")
            return CartResult.failure(e)

    def merge_carts(self, source_cart_id: str, target_cart_id: str) -> CartResult:
        """
        Move every line of the source cart into the target cart

        Business Rules:
        - Only a guest cart can be merged, and only into a user cart
        - Lines for a product already in the target are summed and capped
          at the incoming line's max_quantity
        - Other lines are copied with fresh IDs, keeping their snapshots
        - The source cart is deleted once the merge is applied
        - An empty source is rejected and neither cart changes
        """
        logger.info(f"Merging cart {source_cart_id} into {target_cart_id}")
        self._simulate_latency()

        try:
            if source_cart_id == target_cart_id:
                raise InvalidMergeError()

            # Fixed lock order keeps two opposite merges from deadlocking
            first, second = sorted((source_cart_id, target_cart_id))
            with self._cart_lock(first), self._cart_lock(second):
                source = self._require_cart(source_cart_id)
                target = self._require_cart(target_cart_id)
                if not source.is_guest or target.is_guest:
                    raise InvalidMergeError("Only a guest cart can be merged into a user cart")
                if source.is_empty:
                    raise CartEmptyError(source_cart_id)

                for line in source.items:
                    existing_item = target.get_item_by_product(line.product_id)
                    if existing_item:
                        existing_item.quantity = min(
                            existing_item.quantity + line.quantity,
                            line.max_quantity,
                        )
                    else:
                        target.items.append(CartItem(
                            id=self._new_item_id(),
                            product_id=line.product_id,
                            name=line.name,
                            price=line.price,
                            quantity=line.quantity,
                            image=line.image,
                            max_quantity=line.max_quantity,
                        ))
                    self._record(target.id, OperationType.MERGE, line.product_id, line.quantity)

                target.recompute_totals()
                self.cart_repo.delete(source.id)
                result = CartResult.ok(target.snapshot())
        except CartError as e:
            logger.warning(f"Merge of cart {source_cart_id} into {target_cart_id} rejected: {e.message}")
            return CartResult.failure(e)

        self._forget(source_cart_id)
        logger.info(f"Merged cart {source_cart_id} into {target_cart_id}")
        return result

    def get_operations(self, cart_id: str, limit: Optional[int] = None) -> List[CartOperation]:
        """Most recent operations on a cart, oldest first"""
        limit = self.default_history_limit if limit is None else limit
        with self._cart_lock(cart_id):
            operations = list(self._operations.get(cart_id, ()))
        return operations[-limit:] if limit > 0 else []

    def get_stats(self) -> CartStats:
        """Aggregate figures over every cart in the store"""
        carts = [self._snapshot(cart.id) for cart in self.cart_repo.list_all()]
        carts = [cart for cart in carts if cart is not None]
        total_value = sum((cart.total for cart in carts), Decimal("0"))
        average = total_value / len(carts) if carts else Decimal("0")
        return CartStats(
            total_carts=len(carts),
            guest_carts=sum(1 for cart in carts if cart.is_guest),
            user_carts=sum(1 for cart in carts if not cart.is_guest),
            total_items=sum(cart.item_count for cart in carts),
            total_value=total_value,
            average_cart_value=FormattingUtils.to_decimal(average),
        )

    # Private helpers
    def _snapshot(self, cart_id: str) -> Optional[Cart]:
        with self._cart_lock(cart_id):
            cart = self.cart_repo.get_by_id(cart_id)
            return cart.snapshot() if cart else None

    def _require_cart(self, cart_id: str) -> Cart:
        cart = self.cart_repo.get_by_id(cart_id)
        if cart is None:
            raise CartNotFoundError(cart_id)
        return cart

    def _remove_line(self, cart: Cart, item_id: str) -> None:
        index = cart.index_of(item_id)
        if index == -1:
            raise ItemNotFoundError(item_id)
        removed = cart.items.pop(index)
        cart.recompute_totals()
        self._record(cart.id, OperationType.REMOVE, removed.product_id)

    def _record(
        self,
        cart_id: str,
        op_type: OperationType,
        product_id: Optional[str] = None,
        quantity: Optional[int] = None,
    ) -> None:
        """Append to the cart's history. Caller holds the cart lock"""
        history = self._operations.setdefault(cart_id, deque(maxlen=self.history_size))
        history.append(CartOperation(type=op_type, product_id=product_id, quantity=quantity))

    @contextmanager
    def _cart_lock(self, cart_id: str) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.get(cart_id)
            if lock is None:
                if not self.cart_repo.exists(cart_id):
                    # Nothing to guard: the operation will report CartNotFound
                    lock = None
                else:
                    lock = self._locks[cart_id] = threading.Lock()
        if lock is None:
            yield
            return
        with lock:
            yield

    def _forget(self, cart_id: str) -> None:
        with self._locks_guard:
            self._locks.pop(cart_id, None)
            self._operations.pop(cart_id, None)

    def _simulate_latency(self) -> None:
        if self.latency_seconds > 0:
            time.sleep(self.latency_seconds)

    @staticmethod
    def _new_cart(user_id: Optional[str] = None) -> Cart:
        suffix = uuid.uuid4().hex[:12]
        cart_id = f"cart_{user_id}_{suffix}" if user_id is not None else f"guest_{suffix}"
        now = DateUtils.now_utc()
        return Cart(id=cart_id, user_id=user_id, created_at=now, updated_at=now)

    @staticmethod
    def _new_item_id() -> str:
        return f"item_{uuid.uuid4().hex}"

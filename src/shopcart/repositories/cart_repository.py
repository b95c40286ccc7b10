import threading
from abc import abstractmethod
from typing import Callable, Dict, List, Optional, Tuple

from shopcart.models.cart import Cart
from shopcart.repositories.base import BaseRepository
import logging

logger = logging.getLogger(__name__)


class CartRepository(BaseRepository[Cart]):
    """
    Storage capability for carts.

    Implementations hand out the stored objects themselves; callers that
    mutate them are expected to serialize access per cart.
    """

    @abstractmethod
    def put(self, cart: Cart) -> Cart:
        """Insert or replace a cart"""
        pass

    @abstractmethod
    def delete(self, cart_id: str) -> bool:
        """Remove a cart. Returns False if it did not exist"""
        pass

    @abstractmethod
    def find_by_user_id(self, user_id: str) -> Optional[Cart]:
        """The cart owned by a user, or None"""
        pass

    @abstractmethod
    def get_or_create_for_user(
        self, user_id: str, factory: Callable[[], Cart]
    ) -> Tuple[Cart, bool]:
        """
        Return the user's cart, creating it with ``factory`` if absent.

        Lookup and creation are atomic: one user never ends up with two carts.
        Returns (cart, created).
        """
        pass


class InMemoryCartRepository(CartRepository):
    """Process-local cart storage. Everything is lost on restart."""

    def __init__(self):
        self._carts: Dict[str, Cart] = {}
        self._user_index: Dict[str, str] = {}  # user_id -> cart_id
        self._lock = threading.RLock()

    def get_by_id(self, cart_id: str) -> Optional[Cart]:
        with self._lock:
            return self._carts.get(cart_id)

    def list_all(self) -> List[Cart]:
        with self._lock:
            return list(self._carts.values())

    def put(self, cart: Cart) -> Cart:
        with self._lock:
            if cart.user_id is not None:
                owner_cart_id = self._user_index.get(cart.user_id)
                if owner_cart_id is not None and owner_cart_id != cart.id:
                    raise ValueError(f"User {cart.user_id} already has cart {owner_cart_id}")
                self._user_index[cart.user_id] = cart.id
            self._carts[cart.id] = cart
            return cart

    def delete(self, cart_id: str) -> bool:
        with self._lock:
            cart = self._carts.pop(cart_id, None)
            if cart is None:
                return False
            if cart.user_id is not None and self._user_index.get(cart.user_id) == cart_id:
                del self._user_index[cart.user_id]
            return True

    def find_by_user_id(self, user_id: str) -> Optional[Cart]:
        with self._lock:
            cart_id = self._user_index.get(user_id)
            return self._carts.get(cart_id) if cart_id is not None else None

    def get_or_create_for_user(
        self, user_id: str, factory: Callable[[], Cart]
    ) -> Tuple[Cart, bool]:
        with self._lock:
            existing = self.find_by_user_id(user_id)
            if existing is not None:
                return existing, False
            cart = factory()
            if cart.user_id != user_id:
                raise ValueError("Cart factory produced a cart for a different user")
            self.put(cart)
            logger.debug(f"Indexed new cart {cart.id} for user {user_id}")
            return cart, True

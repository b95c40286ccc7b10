from typing import Dict, Iterable, Optional

from shopcart.models.user import User
import logging

logger = logging.getLogger(__name__)


class DemoUserDirectory:
    """
    Stand-in for the authentication collaborator.

    Resolves a user ID (taken from the X-User-Id header) to a known user.
    There are no passwords or sessions; the cart store only needs the ID.
    """

    def __init__(self, users: Iterable[User]):
        self._users: Dict[str, User] = {user.id: user for user in users}

    def get_user(self, user_id: Optional[str]) -> Optional[User]:
        if not user_id:
            return None
        user = self._users.get(user_id.strip())
        if user is None:
            logger.warning(f"Unknown user ID: {user_id}")
        return user

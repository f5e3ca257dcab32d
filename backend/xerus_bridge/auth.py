"""
Current-user context.

Repository adapters ask this accessor for the caller's identity at the point
of delegation. It holds process-wide state with an explicit lifecycle:
``sign_in`` on login, ``sign_out`` on logout. There is no fallback user;
reading the identity while signed out raises ``NotAuthenticatedError``.
"""

import logging
import threading
from typing import Any, Optional

from .errors import NotAuthenticatedError

logger = logging.getLogger(__name__)


class AuthContext:
    """Holds the signed-in user for this process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._user_id: Optional[str] = None
        self._profile: dict[str, Any] = {}

    def sign_in(self, user_id: str, **profile: Any) -> None:
        if not user_id:
            raise ValueError("user_id is required")
        with self._lock:
            self._user_id = user_id
            self._profile = {"uid": user_id, **profile}
        logger.info(f"[Auth] Signed in user {user_id}")

    def sign_out(self) -> None:
        with self._lock:
            previous = self._user_id
            self._user_id = None
            self._profile = {}
        if previous:
            logger.info(f"[Auth] Signed out user {previous}")

    @property
    def is_authenticated(self) -> bool:
        return self._user_id is not None

    def get_current_user_id(self) -> str:
        user_id = self._user_id
        if user_id is None:
            raise NotAuthenticatedError()
        return user_id

    def get_current_user(self) -> dict[str, Any]:
        self.get_current_user_id()
        return dict(self._profile)


auth_context = AuthContext()


def get_auth_context() -> AuthContext:
    return auth_context

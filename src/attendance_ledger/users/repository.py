from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import User


class UserRepository(Protocol):
    """Repository interface for users.

    Note (DIP): services depend on this interface, not on a concrete DB.
    Implementations must enforce active-email uniqueness atomically in the
    store and raise ``ConflictError`` when it is violated.
    """

    def get_by_id(self, user_id: str, *, include_deleted: bool = False) -> Optional[User]:
        raise NotImplementedError

    def get_active_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, user_id: str, name: str, email: str, picture: Optional[str], now: datetime) -> User:
        raise NotImplementedError

    def update_profile(
        self,
        *,
        user_id: str,
        name: Optional[str],
        email: Optional[str],
        picture: Optional[str],
        now: datetime,
        clear_picture: bool = False,
    ) -> Optional[User]:
        """``None`` fields keep their value; ``clear_picture`` sets the picture to NULL.

        Returns ``None`` when no active user matched.
        """

        raise NotImplementedError

    def soft_delete(self, user_id: str, *, now: datetime) -> bool:
        """Returns ``False`` when no active user matched."""

        raise NotImplementedError

    def hard_delete(self, user_id: str) -> Optional[int]:
        """Physically removes the user; returns cascaded event count or ``None`` when absent."""

        raise NotImplementedError

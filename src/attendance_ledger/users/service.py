from __future__ import annotations

import logging
import uuid
from typing import Callable, Optional

from ..common.datetime_utils import now_utc
from ..common.validators import normalize_email, normalize_name, normalize_picture
from ..core.exceptions import AlreadyDeletedError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

# Marks a profile field the caller did not send, as opposed to an explicit None.
UNSET = object()


class IdentityService:
    """Use case: provision, update and retire users.

    Email uniqueness among active users is left to the repository, which
    enforces it with a store constraint; this service never checks first.
    """

    def __init__(self, users: UserRepository, *, clock: Callable = now_utc, id_factory: Callable[[], str] | None = None):
        self._users = users
        self._clock = clock
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def create_user(self, name: str, email: str, picture: Optional[str] = None) -> User:
        name = normalize_name(name)
        email = normalize_email(email)
        picture = normalize_picture(picture)

        user = self._users.create_user(
            user_id=self._id_factory(),
            name=name,
            email=email,
            picture=picture,
            now=self._clock(),
        )
        logger.info("[identity] created user %s", user.id)
        return user

    def get_user(self, user_id: str, *, include_deleted: bool = False) -> User:
        user = self._users.get_by_id(_require_id(user_id), include_deleted=include_deleted)
        if not user:
            raise NotFoundError(f"User with id {user_id} not found")
        return user

    def lookup_active_by_email(self, email: str) -> Optional[User]:
        return self._users.get_active_by_email(normalize_email(email))

    def update_profile(
        self,
        user_id: str,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        picture: Optional[str] | object = UNSET,
    ) -> User:
        """Partial update; omitted fields are kept.

        Passing ``picture=None`` or an empty string removes the current picture.
        """

        new_picture = None if picture is UNSET else normalize_picture(picture)
        user = self._users.update_profile(
            user_id=_require_id(user_id),
            name=normalize_name(name) if name is not None else None,
            email=normalize_email(email) if email is not None else None,
            picture=new_picture,
            clear_picture=picture is not UNSET and new_picture is None,
            now=self._clock(),
        )
        if not user:
            raise NotFoundError(f"User with id {user_id} not found")
        logger.info("[identity] updated user %s", user.id)
        return user

    def soft_delete_user(self, user_id: str) -> User:
        user_id = _require_id(user_id)
        if self._users.soft_delete(user_id, now=self._clock()):
            logger.info("[identity] soft-deleted user %s", user_id)
            return self.get_user(user_id, include_deleted=True)

        existing = self._users.get_by_id(user_id, include_deleted=True)
        if not existing:
            raise NotFoundError(f"User with id {user_id} not found")
        raise AlreadyDeletedError(f"User with id {user_id} is already deleted")

    def hard_delete_user(self, user_id: str) -> int:
        """Privileged purge: removes the row and, through the FK cascade, its events."""

        removed = self._users.hard_delete(_require_id(user_id))
        if removed is None:
            raise NotFoundError(f"User with id {user_id} not found")
        logger.warning("[identity] hard-deleted user %s (%d events removed)", user_id, removed)
        return removed


def _require_id(user_id: str) -> str:
    if not isinstance(user_id, str) or not user_id.strip():
        raise ValidationError("user id is required")
    return user_id.strip()

"""Mock sign-in and the persisted current-user session.

MockAuthenticator accepts any email and fabricates a user from it. It is a
placeholder with the same seam a real credential check would use, not a
security boundary.
"""
import logging
import time
import uuid
from typing import Optional
from urllib.parse import quote

from smartprep.models import User, UserRole
from smartprep.storage import USER_KEY, Storage

logger = logging.getLogger(__name__)

LOGIN_DELAY = 0.8
AVATAR_URL = "https://ui-avatars.com/api/?name={name}&background=0D8ABC&color=fff"


class Authenticator:
    def authenticate(self, email: str) -> User:
        raise NotImplementedError


class MockAuthenticator(Authenticator):
    def authenticate(self, email: str) -> User:
        return User(
            id=f"u_{uuid.uuid4().hex[:8]}",
            name=email.split("@")[0],
            email=email,
            role=UserRole.ADMIN if "admin" in email else UserRole.STUDENT,
            avatar=AVATAR_URL.format(name=quote(email)),
        )


def set_current_user(store: Storage, user: User) -> None:
    store.save(USER_KEY, user.to_dict())


def clear_current_user(store: Storage) -> None:
    store.remove(USER_KEY)


def get_current_user(store: Storage) -> Optional[User]:
    """Restore the persisted session, or None if absent or unreadable."""
    data = store.load(USER_KEY)
    if not data:
        return None
    try:
        return User.from_dict(data)
    except (KeyError, TypeError, ValueError):
        logger.warning("Discarding unreadable session record")
        return None


def login(store: Storage, email: str, authenticator: Optional[Authenticator] = None,
          delay: float = LOGIN_DELAY) -> User:
    email = email.strip()
    if not email:
        raise ValueError("Email is required.")
    if delay:
        time.sleep(delay)
    user = (authenticator or MockAuthenticator()).authenticate(email)
    set_current_user(store, user)
    logger.info("Signed in %s as %s", user.email, user.role.value)
    return user


def logout(store: Storage) -> None:
    clear_current_user(store)

# tests/test_auth.py
import pytest

from smartprep.auth import (
    Authenticator, MockAuthenticator, clear_current_user, get_current_user, login, logout,
    set_current_user,
)
from smartprep.models import User, UserRole
from smartprep.storage import USER_KEY, SqliteStorage


def test_login_student_role(store):
    user = login(store, "student@example.com", delay=0)
    assert user.role == UserRole.STUDENT
    assert user.name == "student"
    assert user.email == "student@example.com"


def test_login_admin_role(store):
    user = login(store, "admin@x.com", delay=0)
    assert user.role == UserRole.ADMIN


def test_login_persists_session(store):
    user = login(store, "kim@example.com", delay=0)
    assert get_current_user(store) == user


def test_logout_clears_session(store):
    login(store, "kim@example.com", delay=0)
    logout(store)
    assert get_current_user(store) is None


def test_login_rejects_blank_email(store):
    with pytest.raises(ValueError):
        login(store, "   ", delay=0)
    assert get_current_user(store) is None


def test_mock_authenticator_builds_avatar():
    user = MockAuthenticator().authenticate("lee@example.com")
    assert user.avatar.startswith("https://ui-avatars.com/api/?name=lee%40example.com")
    assert user.id.startswith("u_")


def test_login_uses_custom_authenticator(store):
    class Fixed(Authenticator):
        def authenticate(self, email):
            return User(id="u_fixed", name="Fixed", email=email)

    user = login(store, "x@y.z", authenticator=Fixed(), delay=0)
    assert user.id == "u_fixed"
    assert get_current_user(store).id == "u_fixed"


def test_session_restored_from_durable_store(tmp_db):
    login(SqliteStorage(tmp_db), "restore@example.com", delay=0)
    restored = get_current_user(SqliteStorage(tmp_db))
    assert restored.email == "restore@example.com"


def test_corrupted_session_is_absent(store):
    store.save(USER_KEY, {"name": "missing id"})
    assert get_current_user(store) is None


def test_set_and_clear_current_user(store):
    user = User(id="u_1", name="a", email="a@b.c")
    set_current_user(store, user)
    assert get_current_user(store) == user
    clear_current_user(store)
    assert get_current_user(store) is None

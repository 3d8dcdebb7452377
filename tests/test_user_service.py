import pytest

from sitecms.auth.passwords import verify_password
from sitecms.auth.users import find_user, get_users
from sitecms.errors import ConflictError, ForbiddenError, NotFoundError
from sitecms.services import user_service


def test_create_user_hashes_password(users_file):
    u = user_service.create_user(path=users_file, username="bob", password="pw", role="editor")
    stored = find_user(get_users(path=users_file), "bob")
    assert stored.password != "pw"
    assert verify_password(stored.password, "pw")
    assert u.created_at.endswith("Z")


def test_create_duplicate_conflicts(users_file):
    with pytest.raises(ConflictError):
        user_service.create_user(path=users_file, username="admin", password="pw", role="admin")


def test_any_role_string_is_accepted(users_file):
    user_service.create_user(path=users_file, username="guest", password="pw", role="whatever-role")
    assert find_user(get_users(path=users_file), "guest").role == "whatever-role"


def test_update_password_and_role(users_file):
    user_service.update_user(path=users_file, username="editor", password="new-pw")
    user_service.update_user(path=users_file, username="editor", role="admin")
    stored = find_user(get_users(path=users_file), "editor")
    assert verify_password(stored.password, "new-pw")
    assert stored.role == "admin"


def test_update_missing_user(users_file):
    with pytest.raises(NotFoundError):
        user_service.update_user(path=users_file, username="ghost", role="admin")


def test_cannot_delete_yourself(users_file):
    with pytest.raises(ForbiddenError):
        user_service.delete_user(path=users_file, username="editor", current_user="editor")


def test_cannot_delete_last_admin(users_file):
    with pytest.raises(ForbiddenError):
        user_service.delete_user(path=users_file, username="admin", current_user="editor")
    assert find_user(get_users(path=users_file), "admin") is not None


def test_delete_admin_when_another_admin_exists(users_file):
    user_service.create_user(path=users_file, username="root", password="pw", role="admin")
    user_service.delete_user(path=users_file, username="admin", current_user="editor")
    assert find_user(get_users(path=users_file), "admin") is None


def test_delete_missing_user(users_file):
    with pytest.raises(NotFoundError):
        user_service.delete_user(path=users_file, username="ghost", current_user="admin")


def test_upsert_creates_file_and_replaces(tmp_path):
    p = tmp_path / "new" / "users.json"
    first = user_service.upsert_user(path=p, username="admin", password="one", role="admin")
    second = user_service.upsert_user(path=p, username="admin", password="two", role="admin")
    users = get_users(path=p)
    assert len(users) == 1
    assert verify_password(users[0].password, "two")
    assert second.created_at == first.created_at

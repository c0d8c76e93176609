from __future__ import annotations

import pytest

from useradmin.errors import ConflictError, NotFoundError, ValidationError
from useradmin.models import UserStatus
from useradmin.seed import SAMPLE_USERS, seed_store
from useradmin.store import UserStore


def _new_user(store: UserStore, email: str = "new.person@example.com", **overrides):
    fields = {
        "name": "New Person",
        "email": email,
        "role": "user",
        "status": "pending",
        "date_joined": "Mar 1, 2024",
    }
    fields.update(overrides)
    return store.insert(**fields)


@pytest.fixture()
def store() -> UserStore:
    user_store = UserStore()
    seed_store(user_store)
    return user_store


def test_seed_assigns_sequential_identifiers(store: UserStore) -> None:
    users = store.list_all()

    assert len(store) == len(SAMPLE_USERS) == 12
    assert [user.id for user in users] == list(range(1, 13))
    assert users[0].name == "John Smith"
    assert users[0].status is UserStatus.ACTIVE


def test_get_and_get_by_email(store: UserStore) -> None:
    emily = store.get(6)
    assert emily is not None
    assert emily.name == "Emily Chen"

    assert store.get_by_email("emily.chen@example.com") == emily
    assert store.get_by_email("Emily.Chen@example.com") is None
    assert store.get(999) is None


def test_insert_normalises_fields() -> None:
    store = UserStore()
    user = _new_user(store, name="  Padded Name ", last_login="   ")

    assert user.name == "Padded Name"
    assert user.last_login is None
    assert user.status is UserStatus.PENDING


def test_duplicate_email_is_rejected_without_advancing_counter(store: UserStore) -> None:
    with pytest.raises(ConflictError):
        _new_user(store, email="john.smith@example.com")

    assert len(store) == 12
    created = _new_user(store)
    assert created.id == 13


def test_email_uniqueness_is_case_sensitive(store: UserStore) -> None:
    created = _new_user(store, email="John.Smith@example.com")
    assert created.id == 13


def test_deleted_identifiers_are_never_reused(store: UserStore) -> None:
    assert store.delete(12) is True
    assert store.get(12) is None
    assert store.delete(12) is False

    created = _new_user(store)
    assert created.id == 13
    assert [user.id for user in store.list_all()][-1] == 13


def test_update_merges_partial_changes(store: UserStore) -> None:
    updated = store.update(2, {"status": "inactive", "last_login": None})

    assert updated.status is UserStatus.INACTIVE
    assert updated.last_login is None
    assert updated.name == "Alice Davis"
    assert updated.email == "alice.davis@example.com"
    assert store.get(2) == updated


def test_update_keeps_insertion_order(store: UserStore) -> None:
    store.update(1, {"name": "Johnny Smith"})
    assert [user.id for user in store.list_all()] == list(range(1, 13))


def test_update_to_own_email_succeeds(store: UserStore) -> None:
    updated = store.update(1, {"email": "john.smith@example.com", "role": "editor"})
    assert updated.role == "editor"


def test_update_to_other_users_email_conflicts(store: UserStore) -> None:
    with pytest.raises(ConflictError):
        store.update(1, {"email": "alice.davis@example.com"})
    assert store.get(1).email == "john.smith@example.com"


def test_update_unknown_user(store: UserStore) -> None:
    with pytest.raises(NotFoundError):
        store.update(999, {"name": "Ghost"})


def test_update_rejects_identifier_and_unknown_fields(store: UserStore) -> None:
    with pytest.raises(ValidationError):
        store.update(1, {"id": 42})
    with pytest.raises(ValidationError):
        store.update(1, {"nickname": "JJ"})


def test_update_rejects_null_for_required_field(store: UserStore) -> None:
    with pytest.raises(ValidationError):
        store.update(1, {"name": None})


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "   "},
        {"status": "banned"},
        {"role": "super/admin"},
        {"role": "double  space"},
        {"role": "r" * 33},
        {"date_joined": ""},
    ],
)
def test_insert_rejects_invalid_fields(overrides) -> None:
    store = UserStore()
    with pytest.raises(ValidationError):
        _new_user(store, **overrides)
    assert len(store) == 0


def test_allowed_roles_restrict_inserts_and_updates() -> None:
    store = UserStore(allowed_roles=["admin", "user"])
    user = _new_user(store, role="admin")

    with pytest.raises(ValidationError):
        _new_user(store, email="other@example.com", role="editor")
    with pytest.raises(ValidationError):
        store.update(user.id, {"role": "moderator"})

    assert store.allowed_roles == frozenset({"admin", "user"})


def test_open_role_tags_and_plain_emails_are_accepted() -> None:
    store = UserStore()
    user = _new_user(store, email="plainname", role="Super Admin")

    assert user.email == "plainname"
    assert user.role == "Super Admin"

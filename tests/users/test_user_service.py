from decimal import Decimal

import pytest

from timesheet_tracker.core.enums import Role
from timesheet_tracker.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


def test_authenticate_is_case_insensitive_on_email(container):
    s_user = container.auth_service.authenticate("John.Smith@CWI-facades.co.uk", "operative123")
    assert s_user.user_id == 2
    assert s_user.role == Role.OPERATIVE


@pytest.mark.parametrize("email,password", [("john.smith@cwi-facades.co.uk", "nope"), ("nobody@x.com", "x"), ("", "")])
def test_authenticate_failures_are_generic(container, email, password):
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        container.auth_service.authenticate(email, password)


def test_deactivated_user_cannot_log_in_or_keep_session(container, store, admin):
    container.user_service.update_user(admin, 2, is_active=False)
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("john.smith@cwi-facades.co.uk", "operative123")
    with pytest.raises(AuthenticationError, match="Unauthorized"):
        container.auth_service.resolve_actor(2)


def test_resolve_actor_loads_supervisor_assignments(container, store, general):
    store.assign(store.users[3], general)
    actor = container.auth_service.resolve_actor(3)
    assert actor.role == Role.SUPERVISOR
    assert actor.assigned_project_ids == frozenset({general.project_id})


def test_change_password(container, john):
    container.auth_service.change_password(john, current_password="operative123", new_password="newpass1")
    assert container.auth_service.authenticate("john.smith@cwi-facades.co.uk", "newpass1").user_id == 2

    with pytest.raises(ValidationError, match="Current password is incorrect"):
        container.auth_service.change_password(john, current_password="wrong", new_password="another1")
    with pytest.raises(ValidationError, match="at least 6"):
        container.auth_service.change_password(john, current_password="newpass1", new_password="abc")


def test_create_account_defaults(container, admin):
    user = container.user_service.create_account(
        admin, name="Pat Lee", email="Pat@Example.com", password="secret1", role="something-odd"
    )
    assert user.email == "pat@example.com"
    assert user.role == Role.OPERATIVE
    assert user.hourly_rate == Decimal("20")
    assert user.is_active


def test_create_account_rejects_duplicates_and_bad_input(container, admin):
    with pytest.raises(ConflictError, match="already exists"):
        container.user_service.create_account(
            admin, name="Again", email="john.smith@cwi-facades.co.uk", password="secret1"
        )
    with pytest.raises(ValidationError, match="Name, email, and password are required"):
        container.user_service.create_account(admin, name="", email="a@b.c", password="secret1")
    with pytest.raises(ValidationError, match="negative"):
        container.user_service.create_account(admin, name="X", email="x@b.c", password="secret1", hourly_rate=-1)


@pytest.mark.parametrize("password", [123456, ["secret1"]])
def test_create_account_rejects_non_text_password(container, store, admin, password):
    with pytest.raises(ValidationError, match="at least 6"):
        container.user_service.create_account(admin, name="Pat", email="pat@x.com", password=password)
    assert all(u.email != "pat@x.com" for u in store.users.values())


def test_change_password_rejects_non_text_password(container, john):
    with pytest.raises(ValidationError, match="at least 6"):
        container.auth_service.change_password(john, current_password="operative123", new_password=123456)
    with pytest.raises(ValidationError, match="Current password is incorrect"):
        container.auth_service.change_password(john, current_password=123456, new_password="newpass1")


def test_supervisor_may_not_create_admin(container, sue):
    with pytest.raises(AuthorizationError, match="Only admins"):
        container.user_service.create_account(sue, name="Boss", email="boss@x.com", password="secret1", role="ADMIN")
    user = container.user_service.create_account(sue, name="New Op", email="op@x.com", password="secret1")
    assert user.role == Role.OPERATIVE


def test_operative_cannot_list_users(container, john):
    with pytest.raises(AuthorizationError, match="Admin or supervisor access required"):
        container.user_service.list_users(john)


def test_cannot_deactivate_self(container, admin):
    with pytest.raises(AuthorizationError, match="deactivate your own account"):
        container.user_service.update_user(admin, admin.user_id, is_active=False)


def test_update_hourly_rate(container, admin):
    user = container.user_service.update_user(admin, 2, hourly_rate="25.75")
    assert user.hourly_rate == Decimal("25.75")


def test_supervisor_cannot_deactivate_or_reprice_the_admin(container, store, sue):
    with pytest.raises(AuthorizationError, match="Only admins can modify admin accounts"):
        container.user_service.update_user(sue, 1, is_active=False)
    with pytest.raises(AuthorizationError, match="Only admins can modify admin accounts"):
        container.user_service.update_user(sue, 1, hourly_rate="99")
    assert store.users[1].is_active
    assert container.auth_service.resolve_actor(1).role == Role.ADMIN


def test_no_admin_is_deactivatable(container, store, admin):
    second_admin = store.add_user("Other Admin", "other@x.com", Role.ADMIN)
    with pytest.raises(AuthorizationError, match="Admin users cannot be deactivated"):
        container.user_service.update_user(admin, second_admin.user_id, is_active=False)
    assert store.users[second_admin.user_id].is_active


def test_supervisor_may_deactivate_an_operative(container, sue):
    assert container.user_service.update_user(sue, 2, is_active=False).is_active is False


def test_admin_is_never_deletable(container, store, admin):
    second_admin = store.add_user("Other Admin", "other@x.com", Role.ADMIN)
    with pytest.raises(AuthorizationError, match="Admin users cannot be deleted"):
        container.user_service.delete_user(admin, second_admin.user_id)
    with pytest.raises(AuthorizationError, match="delete your own account"):
        container.user_service.delete_user(admin, admin.user_id)
    assert second_admin.user_id in store.users


def test_supervisor_cannot_delete_users(container, sue):
    with pytest.raises(AuthorizationError, match="Admin access required"):
        container.user_service.delete_user(sue, 2)


def test_delete_cascades_to_timesheets(container, store, admin, trundleys, today):
    john = store.users[2]
    for day in (1, 4, 5):
        store.add_timesheet(john, trundleys, today.replace(day=day), 8)
    other = store.add_timesheet(store.users[3], trundleys, today, 4)

    removed = container.user_service.delete_user(admin, john.user_id)

    assert removed == 3
    assert john.user_id not in store.users
    assert list(store.timesheets) == [other.timesheet_id]


def test_failed_cascade_leaves_user_and_timesheets(container, store, admin, trundleys, today):
    john = store.users[2]
    store.add_timesheet(john, trundleys, today, 8)
    store.add_timesheet(john, trundleys, today.replace(day=1), 6)
    container.users_repo.fail_cascade = True

    with pytest.raises(RuntimeError):
        container.user_service.delete_user(admin, john.user_id)

    assert john.user_id in store.users
    assert len(store.timesheets) == 2


def test_delete_missing_user(container, admin):
    with pytest.raises(NotFoundError):
        container.user_service.delete_user(admin, 404)

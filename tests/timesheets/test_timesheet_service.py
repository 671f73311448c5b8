from datetime import date
from decimal import Decimal

import pytest

from timesheet_tracker.container import wire_services
from timesheet_tracker.core.enums import NotificationAction, Role, TimesheetStatus
from timesheet_tracker.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from timesheet_tracker.policy.model import Actor

from tests.fakes import (
    FakeAssignmentRepo,
    FakeProjectRepo,
    FakeTimesheetRepo,
    FakeUserRepo,
    RecordingNotifier,
)

MARCH_4 = date(2024, 3, 4)


def test_john_submits_then_admin_approves(container, store, notifier, john, admin, trundleys):
    row = container.timesheet_service.submit(
        john, project_id=trundleys.project_id, work_date="2024-03-04", hours_worked=8, notes="Cladding"
    )
    assert row.status == TimesheetStatus.PENDING
    assert row.hours_worked == Decimal("8")
    assert row.last_edited_by is None

    approved = container.timesheet_service.set_status(admin, row.timesheet_id, "APPROVED")

    assert approved.status == TimesheetStatus.APPROVED
    assert approved.last_edited_by == admin.user_id
    assert [n.action for n in notifier.sent] == [NotificationAction.CREATED, NotificationAction.UPDATED]
    update = notifier.sent[-1]
    assert update.old_hours_worked is None
    assert update.editor_name == "Admin User"
    assert update.project_name == "Trundleys Road"


def test_second_self_submission_is_a_conflict(container, store, john, trundleys):
    svc = container.timesheet_service
    svc.submit(john, project_id=trundleys.project_id, work_date=MARCH_4, hours_worked=8)
    with pytest.raises(ConflictError, match="already have an entry"):
        svc.submit(john, project_id=trundleys.project_id, work_date=MARCH_4, hours_worked=2)
    assert len(store.timesheets) == 1


def test_same_day_on_another_project_is_fine(container, john, trundleys, general):
    svc = container.timesheet_service
    svc.submit(john, project_id=trundleys.project_id, work_date=MARCH_4, hours_worked=4)
    svc.submit(john, project_id=general.project_id, work_date=MARCH_4, hours_worked=4)


@pytest.mark.parametrize("hours", [0, -1, "24.5", 25])
def test_submit_rejects_out_of_range_hours(container, store, john, trundleys, hours):
    with pytest.raises(ValidationError, match="between 0 and 24"):
        container.timesheet_service.submit(john, project_id=trundleys.project_id, work_date=MARCH_4, hours_worked=hours)
    assert store.timesheets == {}


def test_submit_accepts_full_day(container, john, trundleys):
    row = container.timesheet_service.submit(john, project_id=trundleys.project_id, work_date=MARCH_4, hours_worked=24)
    assert row.hours_worked == Decimal("24")


def test_submit_validation(container, store, john, trundleys):
    svc = container.timesheet_service
    with pytest.raises(ValidationError, match="Project, date, and hours are required"):
        svc.submit(john, project_id=None, work_date=MARCH_4, hours_worked=8)
    with pytest.raises(ValidationError, match="YYYY-MM-DD"):
        svc.submit(john, project_id=trundleys.project_id, work_date="04/03/2024", hours_worked=8)
    with pytest.raises(ValidationError, match="YYYY-MM-DD"):
        svc.submit(john, project_id=trundleys.project_id, work_date="2024-03-04garbage", hours_worked=8)
    with pytest.raises(NotFoundError, match="Project not found"):
        svc.submit(john, project_id=99, work_date=MARCH_4, hours_worked=8)

    inactive = store.add_project("Closed Site", is_active=False)
    with pytest.raises(ValidationError, match="not active"):
        svc.submit(john, project_id=inactive.project_id, work_date=MARCH_4, hours_worked=8)


def test_admin_on_behalf_is_approved_and_skips_duplicate_check(container, store, notifier, john, admin, trundleys):
    svc = container.timesheet_service
    svc.submit(john, project_id=trundleys.project_id, work_date=MARCH_4, hours_worked=8)

    row = svc.create_on_behalf(
        admin, user_id=john.user_id, project_id=trundleys.project_id, work_date="2024-03-04", hours_worked=6
    )

    assert row.status == TimesheetStatus.APPROVED
    assert row.last_edited_by == admin.user_id
    assert row.user_id == john.user_id
    assert len(store.timesheets) == 2
    assert notifier.sent[-1].action == NotificationAction.CREATED


def test_unassigned_supervisor_cannot_create(container, store, sue, john, general):
    with pytest.raises(AuthorizationError, match="You do not have access to create timesheets for this project"):
        container.timesheet_service.create_on_behalf(
            sue, user_id=john.user_id, project_id=general.project_id, work_date=MARCH_4, hours_worked=8
        )
    assert store.timesheets == {}


def test_assigned_supervisor_scope(container, store, general, trundleys):
    sue = Actor(user_id=3, name="Sue Brown", role=Role.SUPERVISOR, assigned_project_ids=frozenset({general.project_id}))
    john = store.users[2]
    svc = container.timesheet_service

    row = svc.create_on_behalf(sue, user_id=2, project_id=general.project_id, work_date=MARCH_4, hours_worked=8)
    assert row.status == TimesheetStatus.APPROVED

    elsewhere = store.add_timesheet(john, trundleys, MARCH_4, 5)
    with pytest.raises(AuthorizationError, match="update timesheets"):
        svc.set_status(sue, elsewhere.timesheet_id, "REJECTED")
    with pytest.raises(AuthorizationError, match="delete timesheets"):
        svc.delete(sue, elsewhere.timesheet_id)
    assert store.timesheets[elsewhere.timesheet_id].status == TimesheetStatus.PENDING


def test_on_behalf_requires_existing_user(container, admin, trundleys):
    with pytest.raises(NotFoundError, match="User not found"):
        container.timesheet_service.create_on_behalf(
            admin, user_id=77, project_id=trundleys.project_id, work_date=MARCH_4, hours_worked=8
        )


def test_operative_cannot_use_admin_mutations(container, store, john, trundleys):
    ts = store.add_timesheet(store.users[2], trundleys, MARCH_4, 8)
    with pytest.raises(AuthorizationError):
        container.timesheet_service.set_status(john, ts.timesheet_id, "APPROVED")
    with pytest.raises(AuthorizationError):
        container.timesheet_service.list_all(john)


def test_edit_hours_keeps_status_and_reports_old_hours(container, store, notifier, admin, trundleys):
    ts = store.add_timesheet(store.users[2], trundleys, MARCH_4, 8, status=TimesheetStatus.REJECTED)

    row = container.timesheet_service.edit_hours(admin, ts.timesheet_id, "7.5")

    assert row.hours_worked == Decimal("7.5")
    assert row.status == TimesheetStatus.REJECTED
    assert row.last_edited_by == admin.user_id
    sent = notifier.sent[-1]
    assert sent.action == NotificationAction.UPDATED
    assert sent.old_hours_worked == Decimal("8")
    assert sent.hours_worked == Decimal("7.5")


def test_edit_hours_allows_zero_but_not_negative(container, store, admin, trundleys):
    ts = store.add_timesheet(store.users[2], trundleys, MARCH_4, 8)
    assert container.timesheet_service.edit_hours(admin, ts.timesheet_id, 0).hours_worked == Decimal("0")
    with pytest.raises(ValidationError, match="negative"):
        container.timesheet_service.edit_hours(admin, ts.timesheet_id, -2)


def test_update_with_unchanged_hours_has_no_old_hours(container, store, notifier, admin, trundleys):
    ts = store.add_timesheet(store.users[2], trundleys, MARCH_4, 8)
    container.timesheet_service.update(admin, ts.timesheet_id, status="approved", hours_worked="8.00")
    assert notifier.sent[-1].old_hours_worked is None
    assert store.timesheets[ts.timesheet_id].status == TimesheetStatus.APPROVED


def test_update_validation(container, store, admin, trundleys):
    ts = store.add_timesheet(store.users[2], trundleys, MARCH_4, 8)
    svc = container.timesheet_service
    with pytest.raises(ValidationError, match="Invalid status"):
        svc.update(admin, ts.timesheet_id, status="DONE")
    with pytest.raises(ValidationError, match="Status or hours is required"):
        svc.update(admin, ts.timesheet_id)
    with pytest.raises(NotFoundError):
        svc.update(admin, 999, status="APPROVED")


def test_any_status_to_any_status(container, store, admin, trundleys):
    ts = store.add_timesheet(store.users[2], trundleys, MARCH_4, 8)
    for status in ("REJECTED", "APPROVED", "PENDING", "REJECTED"):
        assert container.timesheet_service.set_status(admin, ts.timesheet_id, status).status.value == status


def test_delete_notifies_with_snapshot(container, store, notifier, admin, trundleys):
    ts = store.add_timesheet(store.users[2], trundleys, MARCH_4, 6)

    container.timesheet_service.delete(admin, ts.timesheet_id)

    assert store.timesheets == {}
    sent = notifier.sent[-1]
    assert sent.action == NotificationAction.DELETED
    assert sent.user_name == "John Smith"
    assert sent.hours_worked == Decimal("6")
    assert sent.work_date == MARCH_4


def test_notification_failure_never_fails_the_mutation(store, john, admin, trundleys):
    failing = RecordingNotifier(fail=True)
    container = wire_services(
        users_repo=FakeUserRepo(store),
        projects_repo=FakeProjectRepo(store),
        timesheets_repo=FakeTimesheetRepo(store),
        assignments_repo=FakeAssignmentRepo(store),
        notifier=failing,
    )
    svc = container.timesheet_service

    row = svc.submit(john, project_id=trundleys.project_id, work_date=MARCH_4, hours_worked=8)
    svc.set_status(admin, row.timesheet_id, "APPROVED")
    svc.delete(admin, row.timesheet_id)

    assert store.timesheets == {}


def test_list_own_only_returns_own_rows(container, store, john, trundleys):
    store.add_timesheet(store.users[2], trundleys, MARCH_4, 8)
    store.add_timesheet(store.users[3], trundleys, MARCH_4, 8)
    rows = container.timesheet_service.list_own(john)
    assert [r.user_id for r in rows] == [2]


def test_list_all_filters_by_status(container, store, sue, trundleys):
    john = store.users[2]
    store.add_timesheet(john, trundleys, MARCH_4, 8)
    store.add_timesheet(john, trundleys, date(2024, 3, 5), 8, status=TimesheetStatus.APPROVED)
    rows = container.timesheet_service.list_all(sue, status="PENDING")
    assert [r.work_date for r in rows] == [MARCH_4]
    assert len(container.timesheet_service.list_all(sue)) == 2

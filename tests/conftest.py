from __future__ import annotations

from datetime import date

import pytest

from timesheet_tracker.container import wire_services
from timesheet_tracker.core.enums import Role
from timesheet_tracker.policy.model import Actor

from tests.fakes import (
    FakeAssignmentRepo,
    FakeProjectRepo,
    FakeTimesheetRepo,
    FakeUserRepo,
    InMemoryStore,
    RecordingNotifier,
    fixed_today,
)

TODAY = date(2024, 3, 29)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def store():
    s = InMemoryStore()
    s.add_user("Admin User", "admin@cwi-facades.co.uk", Role.ADMIN, password="admin123", hourly_rate="0")
    s.add_user("John Smith", "john.smith@cwi-facades.co.uk", Role.OPERATIVE, password="operative123", hourly_rate="22.50")
    s.add_user("Sue Brown", "sue@cwi-facades.co.uk", Role.SUPERVISOR, password="supervisor123", hourly_rate="0")
    s.add_project("Trundleys Road", "Deptford, London")
    s.add_project("General Maintenance", "Various")
    return s


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def container(store, notifier, today):
    users = FakeUserRepo(store)
    return wire_services(
        users_repo=users,
        projects_repo=FakeProjectRepo(store),
        timesheets_repo=FakeTimesheetRepo(store),
        assignments_repo=FakeAssignmentRepo(store),
        notifier=notifier,
        today=fixed_today(today),
    )


@pytest.fixture
def admin(store):
    return Actor(user_id=1, name="Admin User", role=Role.ADMIN)


@pytest.fixture
def john(store):
    return Actor(user_id=2, name="John Smith", role=Role.OPERATIVE)


@pytest.fixture
def sue(store):
    """Supervisor without any project assignment."""
    return Actor(user_id=3, name="Sue Brown", role=Role.SUPERVISOR)


@pytest.fixture
def trundleys(store):
    return store.projects[1]


@pytest.fixture
def general(store):
    return store.projects[2]

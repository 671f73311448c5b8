import pytest

from timesheet_tracker.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError


def test_create_and_rename_project(container, sue):
    project = container.project_service.create_project(sue, name="  Canary Wharf ", location=" ")
    assert project.name == "Canary Wharf"
    assert project.location is None

    renamed = container.project_service.update_project(sue, project.project_id, name="Canary Wharf Phase 2")
    assert renamed.name == "Canary Wharf Phase 2"

    with pytest.raises(ConflictError, match="already exists"):
        container.project_service.update_project(sue, project.project_id, name="Trundleys Road")


def test_project_name_required(container, admin):
    with pytest.raises(ValidationError, match="Project name is required"):
        container.project_service.create_project(admin, name="   ")


def test_listing_counts_timesheets(container, store, admin, trundleys, today):
    store.add_timesheet(store.users[2], trundleys, today, 8)
    counts = {p.name: p.timesheet_count for p in container.project_service.list_projects(admin)}
    assert counts == {"General Maintenance": 0, "Trundleys Road": 1}


def test_deactivated_project_drops_from_active_list(container, admin, john, general):
    container.project_service.update_project(admin, general.project_id, is_active=False)
    assert [p.name for p in container.project_service.list_active(john)] == ["Trundleys Road"]


def test_operative_cannot_manage_projects(container, john):
    with pytest.raises(AuthorizationError):
        container.project_service.create_project(john, name="Mine")


def test_assign_and_unassign_supervisor(container, store, admin, general):
    row = container.assignment_service.assign(admin, user_id=3, project_id=general.project_id)
    assert (row.user_name, row.project_name) == ("Sue Brown", "General Maintenance")
    assert container.auth_service.resolve_actor(3).assigned_project_ids == frozenset({general.project_id})

    with pytest.raises(ConflictError, match="already assigned"):
        container.assignment_service.assign(admin, user_id="3", project_id=str(general.project_id))

    container.assignment_service.unassign(admin, user_id=3, project_id=general.project_id)
    with pytest.raises(NotFoundError, match="Assignment not found"):
        container.assignment_service.unassign(admin, user_id=3, project_id=general.project_id)


def test_assignment_rules(container, admin, sue, general):
    with pytest.raises(ValidationError, match="User must be a supervisor"):
        container.assignment_service.assign(admin, user_id=2, project_id=general.project_id)
    with pytest.raises(ValidationError, match="User ID and Project ID are required"):
        container.assignment_service.assign(admin, user_id=None, project_id=general.project_id)
    with pytest.raises(NotFoundError, match="Project not found"):
        container.assignment_service.assign(admin, user_id=3, project_id=99)
    with pytest.raises(AuthorizationError, match="Admin access required"):
        container.assignment_service.assign(sue, user_id=3, project_id=general.project_id)

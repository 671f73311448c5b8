from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_text, parse_decimal, parse_id
from ..core.constants import ADMIN_TIMESHEETS_LIMIT, MAX_HOURS_PER_DAY, OWN_TIMESHEETS_LIMIT
from ..core.enums import NotificationAction, Role, TimesheetStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..notifications.dispatcher import Notifier
from ..notifications.model import TimesheetNotification
from ..policy.model import Action, Actor
from ..policy.rules import require
from ..projects.repository import ProjectRepository
from ..users.repository import UserRepository
from .model import TimesheetRow
from .repository import TimesheetRepository

logger = logging.getLogger(__name__)


def parse_status(value: Any) -> TimesheetStatus:
    try:
        return TimesheetStatus(str(value).upper())
    except ValueError:
        raise ValidationError("Invalid status")


class TimesheetService:
    """Timesheet lifecycle: submit, create on behalf, status/hours edits, delete.

    Every successful mutation hands one notification to the notifier after the
    store has committed. The notifier never fails the mutation.
    """

    def __init__(
        self,
        timesheets: TimesheetRepository,
        users: UserRepository,
        projects: ProjectRepository,
        notifier: Notifier,
    ):
        self._timesheets = timesheets
        self._users = users
        self._projects = projects
        self._notifier = notifier

    # ------------------------------------------------------------------ reads

    def get_row(self, timesheet_id: int) -> TimesheetRow:
        row = self._timesheets.get_row(int(timesheet_id))
        if not row:
            raise NotFoundError("Timesheet not found")
        return row

    def list_own(self, actor: Actor, *, limit: int = OWN_TIMESHEETS_LIMIT) -> Sequence[TimesheetRow]:
        require(actor, Action.LIST_OWN_TIMESHEETS, target_user_id=actor.user_id)
        return self._timesheets.list_for_user(actor.user_id, limit=limit)

    def list_all(
        self,
        actor: Actor,
        *,
        status: Any = None,
        limit: int = ADMIN_TIMESHEETS_LIMIT,
    ) -> Sequence[TimesheetRow]:
        require(actor, Action.LIST_ALL_TIMESHEETS)
        wanted = parse_status(status) if status else None
        return self._timesheets.list_rows(status=wanted, limit=limit)

    # -------------------------------------------------------------- creation

    def submit(
        self,
        actor: Actor,
        *,
        project_id: Any,
        work_date: Any,
        hours_worked: Any,
        notes: Any = None,
    ) -> TimesheetRow:
        require(actor, Action.SUBMIT_OWN_TIMESHEET, target_user_id=actor.user_id)
        if not project_id or not work_date or hours_worked in (None, ""):
            raise ValidationError("Project, date, and hours are required")

        pid = parse_id(project_id, "Project ID")
        day = parse_iso_date(work_date)
        hours = parse_decimal(hours_worked, "Hours")
        if hours <= 0 or hours > MAX_HOURS_PER_DAY:
            raise ValidationError("Hours must be between 0 and 24")

        project = self._projects.get_by_id(pid)
        if not project:
            raise NotFoundError("Project not found")
        if not project.is_active:
            raise ValidationError("Project is not active")

        if self._timesheets.find_for_user_project_date(user_id=actor.user_id, project_id=pid, work_date=day):
            raise ConflictError("You already have an entry for this project on this date")

        timesheet_id = self._timesheets.create(
            user_id=actor.user_id,
            project_id=pid,
            work_date=day,
            hours_worked=hours,
            notes=optional_text(notes),
            status=TimesheetStatus.PENDING,
        )
        row = self.get_row(timesheet_id)
        logger.info("User %s submitted timesheet %s", actor.user_id, timesheet_id)
        self._dispatch(NotificationAction.CREATED, row, actor)
        return row

    def create_on_behalf(
        self,
        actor: Actor,
        *,
        user_id: Any,
        project_id: Any,
        work_date: Any,
        hours_worked: Any,
        notes: Any = None,
    ) -> TimesheetRow:
        if not user_id or not project_id or not work_date or hours_worked in (None, ""):
            raise ValidationError("User ID, project ID, date, and hours are required")

        uid = parse_id(user_id, "User ID")
        pid = parse_id(project_id, "Project ID")
        require(actor, Action.CREATE_TIMESHEET, target_project_id=pid)

        day = parse_iso_date(work_date)
        hours = parse_decimal(hours_worked, "Hours")
        if hours <= 0 or hours > MAX_HOURS_PER_DAY:
            raise ValidationError("Hours must be between 0 and 24")

        if not self._users.get_by_id(uid):
            raise NotFoundError("User not found")
        if not self._projects.get_by_id(pid):
            raise NotFoundError("Project not found")

        # entries created on someone's behalf skip the duplicate check
        timesheet_id = self._timesheets.create(
            user_id=uid,
            project_id=pid,
            work_date=day,
            hours_worked=hours,
            notes=optional_text(notes),
            status=TimesheetStatus.APPROVED,
            last_edited_by=actor.user_id,
        )
        row = self.get_row(timesheet_id)
        logger.info("User %s created timesheet %s on behalf of user %s", actor.user_id, timesheet_id, uid)
        self._dispatch(NotificationAction.CREATED, row, actor)
        return row

    # -------------------------------------------------------------- mutation

    def update(
        self,
        actor: Actor,
        timesheet_id: int,
        *,
        status: Any = None,
        hours_worked: Any = None,
    ) -> TimesheetRow:
        """Change status and/or hours. Old hours are reported only when they changed."""
        existing = self.get_row(timesheet_id)
        require(actor, Action.UPDATE_TIMESHEET, target_project_id=existing.project_id)

        new_status: Optional[TimesheetStatus] = None
        new_hours: Optional[Decimal] = None
        if status not in (None, ""):
            new_status = parse_status(status)
        if hours_worked not in (None, ""):
            new_hours = parse_decimal(hours_worked, "Hours")
            if new_hours < 0:
                raise ValidationError("Hours cannot be negative")
        if new_status is None and new_hours is None:
            raise ValidationError("Status or hours is required")

        if not self._timesheets.update(
            existing.timesheet_id,
            last_edited_by=actor.user_id,
            status=new_status,
            hours_worked=new_hours,
        ):
            raise NotFoundError("Timesheet not found")

        row = self.get_row(existing.timesheet_id)
        old_hours = None
        if new_hours is not None and new_hours != existing.hours_worked:
            old_hours = existing.hours_worked
        logger.info("User %s updated timesheet %s", actor.user_id, existing.timesheet_id)
        self._dispatch(NotificationAction.UPDATED, row, actor, old_hours_worked=old_hours)
        return row

    def set_status(self, actor: Actor, timesheet_id: int, status: Any) -> TimesheetRow:
        if status in (None, ""):
            raise ValidationError("Status is required")
        return self.update(actor, timesheet_id, status=status)

    def edit_hours(self, actor: Actor, timesheet_id: int, hours_worked: Any) -> TimesheetRow:
        if hours_worked in (None, ""):
            raise ValidationError("Hours is required")
        return self.update(actor, timesheet_id, hours_worked=hours_worked)

    def delete(self, actor: Actor, timesheet_id: int) -> TimesheetRow:
        """Remove a timesheet; returns the pre-delete snapshot."""
        snapshot = self.get_row(timesheet_id)
        require(actor, Action.DELETE_TIMESHEET, target_project_id=snapshot.project_id)

        if not self._timesheets.delete(snapshot.timesheet_id):
            raise NotFoundError("Timesheet not found")
        logger.info("User %s deleted timesheet %s", actor.user_id, snapshot.timesheet_id)
        self._dispatch(NotificationAction.DELETED, snapshot, actor)
        return snapshot

    def save_weekly_cell(
        self,
        actor: Actor,
        *,
        user_id: Any,
        work_date: Any,
        hours: Any,
    ) -> Optional[TimesheetRow]:
        """Edit one (user, day) cell of the weekly grid.

        The first entry of the day is the edit target. Zero hours deletes it;
        an empty cell with hours creates an approved entry on the first
        active project the actor may use. Returns None when nothing changed.
        """
        require(actor, Action.VIEW_WEEKLY_GRID)
        uid = parse_id(user_id, "User ID")
        day = parse_iso_date(work_date)
        if hours in (None, ""):
            raise ValidationError("Hours is required")
        value = parse_decimal(hours, "Hours")
        if value < 0 or value > MAX_HOURS_PER_DAY:
            raise ValidationError("Hours must be between 0 and 24")

        entries = self._timesheets.list_for_user(uid, start=day, end=day)
        target = entries[0] if entries else None

        if target is not None:
            if value > 0:
                return self.edit_hours(actor, target.timesheet_id, value)
            return self.delete(actor, target.timesheet_id)

        if value == 0:
            return None

        project_id = self._default_project_for(actor)
        return self.create_on_behalf(
            actor,
            user_id=uid,
            project_id=project_id,
            work_date=day,
            hours_worked=value,
        )

    def _default_project_for(self, actor: Actor) -> int:
        for project in self._projects.list_active():
            if actor.role != Role.SUPERVISOR or project.project_id in actor.assigned_project_ids:
                return project.project_id
        if actor.role == Role.SUPERVISOR:
            raise ValidationError("You are not assigned to any active project")
        raise ValidationError("No active project available")

    # ------------------------------------------------------------ side effect

    def _dispatch(
        self,
        action: NotificationAction,
        row: TimesheetRow,
        actor: Actor,
        *,
        old_hours_worked: Optional[Decimal] = None,
    ) -> None:
        try:
            notification = TimesheetNotification.from_row(
                action,
                row,
                editor_name=actor.name,
                old_hours_worked=old_hours_worked,
            )
            self._notifier.notify(notification)
        except Exception:
            logger.exception("Failed to dispatch %s notification for timesheet %s", action.value, row.timesheet_id)

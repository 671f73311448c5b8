from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .assignments.mysql_assignment_repository import MySQLAssignmentRepository
from .assignments.repository import AssignmentRepository
from .assignments.service import AssignmentService
from .database.connection import DBConfig, DatabaseConnection
from .notifications.dispatcher import Notifier
from .projects.mysql_project_repository import MySQLProjectRepository
from .projects.repository import ProjectRepository
from .projects.service import ProjectService
from .reports.service import ReportService
from .timesheets.mysql_timesheet_repository import MySQLTimesheetRepository
from .timesheets.repository import TimesheetRepository
from .timesheets.service import TimesheetService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    notifier: Notifier

    users_repo: UserRepository
    projects_repo: ProjectRepository
    timesheets_repo: TimesheetRepository
    assignments_repo: AssignmentRepository

    auth_service: AuthService
    user_service: UserService
    project_service: ProjectService
    assignment_service: AssignmentService
    timesheet_service: TimesheetService
    report_service: ReportService


def wire_services(
    *,
    users_repo: UserRepository,
    projects_repo: ProjectRepository,
    timesheets_repo: TimesheetRepository,
    assignments_repo: AssignmentRepository,
    notifier: Notifier,
    conn: Optional[DatabaseConnection] = None,
    **report_options: Any,
) -> Container:
    """Build services on top of any repository implementation (MySQL or in-memory)."""
    return Container(
        conn=conn,
        notifier=notifier,
        users_repo=users_repo,
        projects_repo=projects_repo,
        timesheets_repo=timesheets_repo,
        assignments_repo=assignments_repo,
        auth_service=AuthService(users_repo, assignments_repo),
        user_service=UserService(users_repo),
        project_service=ProjectService(projects_repo),
        assignment_service=AssignmentService(assignments_repo, users_repo, projects_repo),
        timesheet_service=TimesheetService(timesheets_repo, users_repo, projects_repo, notifier),
        report_service=ReportService(users_repo, projects_repo, timesheets_repo, **report_options),
    )


def build_container(*, db_config: Union[DBConfig, Mapping[str, Any]], notifier: Notifier) -> Container:
    config = db_config if isinstance(db_config, DBConfig) else DBConfig.from_mapping(db_config)
    conn = DatabaseConnection.get_instance(config)

    return wire_services(
        conn=conn,
        notifier=notifier,
        users_repo=MySQLUserRepository(conn),
        projects_repo=MySQLProjectRepository(conn),
        timesheets_repo=MySQLTimesheetRepository(conn),
        assignments_repo=MySQLAssignmentRepository(conn),
    )

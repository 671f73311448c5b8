"""Subject and body rendering for timesheet notification e-mails."""

from __future__ import annotations

from decimal import Decimal
from html import escape

from ..common.datetime_utils import format_long_date
from ..core.enums import NotificationAction
from .model import TimesheetNotification

_TITLES = {
    NotificationAction.CREATED: "Timesheet Created",
    NotificationAction.UPDATED: "Timesheet Updated",
    NotificationAction.DELETED: "Timesheet Deleted",
}

_EDITOR_LABELS = {
    NotificationAction.CREATED: "Created by",
    NotificationAction.UPDATED: "Modified by",
    NotificationAction.DELETED: "Deleted by",
}

_INTROS = {
    NotificationAction.CREATED: "A new timesheet entry has been created:",
    NotificationAction.UPDATED: "A timesheet entry has been modified:",
    NotificationAction.DELETED: "A timesheet entry has been deleted:",
}


def format_hours(value: Decimal) -> str:
    """8.00 -> '8', 7.50 -> '7.5'."""
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def _fields(n: TimesheetNotification) -> list[tuple[str, str]]:
    fields = [("Operative", n.user_name), ("Date", format_long_date(n.work_date))]
    if n.action == NotificationAction.DELETED:
        fields.append(("Hours", format_hours(n.hours_worked)))
    elif n.action == NotificationAction.UPDATED:
        if n.old_hours_worked is not None:
            fields.append(("Previous Hours", format_hours(n.old_hours_worked)))
        fields.append(("New Hours", format_hours(n.hours_worked)))
    else:
        fields.append(("Hours", format_hours(n.hours_worked)))
    fields.append(("Project", n.project_name))
    if n.action != NotificationAction.DELETED:
        fields.append(("Status", n.status.value))
    fields.append((_EDITOR_LABELS[n.action], n.editor_name))
    return fields


def render_subject(n: TimesheetNotification) -> str:
    return f"{_TITLES[n.action]} - {n.user_name} - {format_long_date(n.work_date)}"


def render_text(n: TimesheetNotification) -> str:
    lines = [_INTROS[n.action], ""]
    lines.extend(f"{label}: {value}" for label, value in _fields(n))
    return "\n".join(lines)


def render_html(n: TimesheetNotification) -> str:
    rows = "".join(
        "<tr>"
        f'<td style="padding: 10px; border-bottom: 1px solid #e5e7eb; font-weight: bold;">{escape(label)}:</td>'
        f'<td style="padding: 10px; border-bottom: 1px solid #e5e7eb;">{escape(value)}</td>'
        "</tr>"
        for label, value in _fields(n)
    )
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        '<div style="background-color: #1e40af; color: white; padding: 20px; text-align: center;">'
        '<h1 style="margin: 0; font-size: 24px;">CWI Facades - Timesheet Notification</h1>'
        "</div>"
        '<div style="padding: 20px; background-color: #f9fafb;">'
        f'<h2 style="color: #1e40af; margin-top: 0;">{escape(_TITLES[n.action])}</h2>'
        f'<table style="width: 100%; border-collapse: collapse;">{rows}</table>'
        "</div>"
        '<div style="padding: 15px; background-color: #e5e7eb; text-align: center; font-size: 12px; color: #6b7280;">'
        "This is an automated notification from CWI Facades Timesheet System"
        "</div>"
        "</div>"
    )

import logging
from datetime import date
from decimal import Decimal

import pytest

from timesheet_tracker.core.enums import NotificationAction, TimesheetStatus
from timesheet_tracker.notifications import sender as sender_module
from timesheet_tracker.notifications.dispatcher import BackgroundNotifier, SynchronousNotifier
from timesheet_tracker.notifications.model import TimesheetNotification
from timesheet_tracker.notifications.sender import DisabledNotificationSender, SmtpNotificationSender, SmtpSettings
from timesheet_tracker.notifications.templates import format_hours, render_html, render_subject, render_text

from tests.fakes import RecordingSender

SETTINGS = SmtpSettings(
    host="smtp.example.com",
    port=587,
    username="mailer",
    password="pw",
    use_tls=True,
    sender="CWI Facades Timesheets <timesheets@cwi-facades.co.uk>",
    recipient="admin@cwi-facades.co.uk",
)


def _notification(action=NotificationAction.UPDATED, old_hours=None):
    return TimesheetNotification(
        action=action,
        timesheet_id=5,
        work_date=date(2024, 3, 4),
        hours_worked=Decimal("7.50"),
        user_name="John Smith",
        user_email="john.smith@cwi-facades.co.uk",
        project_name="Trundleys Road",
        status=TimesheetStatus.APPROVED,
        editor_name="Admin User",
        old_hours_worked=old_hours,
    )


def test_format_hours():
    assert format_hours(Decimal("8.00")) == "8"
    assert format_hours(Decimal("7.50")) == "7.5"
    assert format_hours(Decimal("0")) == "0"


def test_subject_names_action_user_and_date():
    assert render_subject(_notification()) == "Timesheet Updated - John Smith - Monday 4 March 2024"
    assert render_subject(_notification(NotificationAction.DELETED)).startswith("Timesheet Deleted - ")


def test_update_body_shows_previous_hours_only_when_given():
    with_old = render_text(_notification(old_hours=Decimal("8")))
    assert "Previous Hours: 8" in with_old
    assert "New Hours: 7.5" in with_old
    assert "Modified by: Admin User" in with_old

    without_old = render_text(_notification())
    assert "Previous Hours" not in without_old
    assert "Status: APPROVED" in without_old


def test_created_and_deleted_bodies():
    created = render_text(_notification(NotificationAction.CREATED))
    assert created.startswith("A new timesheet entry has been created:")
    assert "Created by: Admin User" in created

    deleted = render_text(_notification(NotificationAction.DELETED))
    assert "Hours: 7.5" in deleted
    assert "Status:" not in deleted
    assert "Deleted by: Admin User" in deleted


def test_html_body_escapes_values():
    n = TimesheetNotification(**{**_notification().__dict__, "user_name": "<b>Eve</b>"})
    html = render_html(n)
    assert "&lt;b&gt;Eve&lt;/b&gt;" in html
    assert "<b>Eve</b>" not in html


def test_smtp_message_is_multipart_to_admin():
    msg = SmtpNotificationSender(SETTINGS).build_message(_notification())
    assert msg["To"] == "admin@cwi-facades.co.uk"
    assert msg["Subject"].startswith("Timesheet Updated")
    assert [p.get_content_type() for p in msg.get_payload()] == ["text/plain", "text/html"]


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host, self.port = host, port
        self.calls = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user))

    def sendmail(self, from_addr, to_addrs, body):
        self.calls.append(("sendmail", from_addr, tuple(to_addrs)))


def test_smtp_send(monkeypatch):
    FakeSMTP.instances.clear()
    monkeypatch.setattr(sender_module.smtplib, "SMTP", FakeSMTP)

    SmtpNotificationSender(SETTINGS).send(_notification())

    smtp = FakeSMTP.instances[0]
    assert (smtp.host, smtp.port) == ("smtp.example.com", 587)
    assert smtp.calls[0] == "starttls"
    assert smtp.calls[1] == ("login", "mailer")
    assert smtp.calls[2] == ("sendmail", "timesheets@cwi-facades.co.uk", ("admin@cwi-facades.co.uk",))


def test_disabled_sender_logs_warning(caplog):
    with caplog.at_level(logging.WARNING):
        DisabledNotificationSender().send(_notification())
    assert "Email notifications disabled" in caplog.text


class FakeScheduler:
    def __init__(self, *, fail=False):
        self.jobs = []
        self.running = False
        self.fail = fail

    def add_job(self, func, args=None):
        if self.fail:
            raise RuntimeError("scheduler is shut down")
        self.jobs.append((func, args))

    def start(self):
        self.running = True

    def shutdown(self, wait=True):
        self.running = False

    def run_pending(self):
        for func, args in self.jobs:
            func(*args)
        self.jobs.clear()


def test_background_notifier_hands_off_to_scheduler():
    sender = RecordingSender()
    scheduler = FakeScheduler()
    notifier = BackgroundNotifier(sender, scheduler=scheduler)
    notifier.start()

    notifier.notify(_notification())

    assert sender.sent == []
    assert len(scheduler.jobs) == 1
    scheduler.run_pending()
    assert len(sender.sent) == 1
    notifier.shutdown()
    assert not scheduler.running


def test_delivery_failure_is_logged_not_raised(caplog):
    scheduler = FakeScheduler()
    notifier = BackgroundNotifier(RecordingSender(fail=True), scheduler=scheduler)
    notifier.notify(_notification())

    with caplog.at_level(logging.ERROR):
        scheduler.run_pending()
    assert "Error sending updated notification for timesheet 5" in caplog.text


def test_scheduling_failure_is_logged_not_raised(caplog):
    notifier = BackgroundNotifier(RecordingSender(), scheduler=FakeScheduler(fail=True))
    with caplog.at_level(logging.ERROR):
        notifier.notify(_notification())
    assert "Could not schedule" in caplog.text


def test_synchronous_notifier_swallows_failures():
    SynchronousNotifier(RecordingSender(fail=True)).notify(_notification())
    sender = RecordingSender()
    SynchronousNotifier(sender).notify(_notification())
    assert len(sender.sent) == 1


@pytest.mark.parametrize("action", list(NotificationAction))
def test_every_action_renders(action):
    assert render_text(_notification(action))
    assert render_html(_notification(action))

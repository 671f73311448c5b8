from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import parseaddr
from typing import Optional, Protocol

from .model import TimesheetNotification
from .templates import render_html, render_subject, render_text

logger = logging.getLogger(__name__)


class NotificationSender(Protocol):
    def send(self, notification: TimesheetNotification) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class SmtpSettings:
    host: str
    port: int
    username: Optional[str]
    password: Optional[str]
    use_tls: bool
    sender: str
    recipient: str


class SmtpNotificationSender(NotificationSender):
    """Send one multipart (plain + HTML) e-mail per notification to the admin inbox."""

    def __init__(self, settings: SmtpSettings, *, timeout: float = 30.0):
        self._settings = settings
        self._timeout = timeout

    def build_message(self, notification: TimesheetNotification) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = self._settings.sender
        msg["To"] = self._settings.recipient
        msg["Subject"] = render_subject(notification)
        msg.attach(MIMEText(render_text(notification), "plain"))
        msg.attach(MIMEText(render_html(notification), "html"))
        return msg

    def send(self, notification: TimesheetNotification) -> None:
        s = self._settings
        msg = self.build_message(notification)
        from_addr = parseaddr(s.sender)[1] or s.sender
        with smtplib.SMTP(s.host, s.port, timeout=self._timeout) as smtp:
            if s.use_tls:
                smtp.starttls()
            if s.username:
                smtp.login(s.username, s.password or "")
            smtp.sendmail(from_addr, [s.recipient], msg.as_string())
        logger.info(
            "Timesheet notification sent: %s - %s",
            notification.action.value,
            notification.user_name,
        )


class DisabledNotificationSender(NotificationSender):
    """Used when no SMTP host is configured: log and drop."""

    def send(self, notification: TimesheetNotification) -> None:
        logger.warning(
            "Email notifications disabled: SMTP_HOST not configured (skipped %s for timesheet %s)",
            notification.action.value,
            notification.timesheet_id,
        )

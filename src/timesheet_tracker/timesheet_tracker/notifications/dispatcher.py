from __future__ import annotations

import logging
from typing import Optional, Protocol

from apscheduler.schedulers.background import BackgroundScheduler

from .model import TimesheetNotification
from .sender import NotificationSender

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, notification: TimesheetNotification) -> None:
        raise NotImplementedError


class BackgroundNotifier(Notifier):
    """Hand each notification to an APScheduler background job.

    A job added without a trigger runs once, immediately, on the scheduler's
    thread pool. Delivery failures are logged and never reach the caller.
    """

    def __init__(self, sender: NotificationSender, scheduler: Optional[BackgroundScheduler] = None):
        self._sender = sender
        self._scheduler = scheduler or BackgroundScheduler(daemon=True)

    @property
    def scheduler(self) -> BackgroundScheduler:
        return self._scheduler

    def start(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()
            logger.info("Notification scheduler started")

    def shutdown(self, wait: bool = False) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)

    def notify(self, notification: TimesheetNotification) -> None:
        try:
            self._scheduler.add_job(self._deliver, args=[notification])
        except Exception:
            logger.exception(
                "Could not schedule %s notification for timesheet %s",
                notification.action.value,
                notification.timesheet_id,
            )

    def _deliver(self, notification: TimesheetNotification) -> None:
        try:
            self._sender.send(notification)
        except Exception:
            logger.exception(
                "Error sending %s notification for timesheet %s",
                notification.action.value,
                notification.timesheet_id,
            )


class SynchronousNotifier(Notifier):
    """Deliver inline on the calling thread (scripts and the testing config)."""

    def __init__(self, sender: NotificationSender):
        self._sender = sender

    def notify(self, notification: TimesheetNotification) -> None:
        try:
            self._sender.send(notification)
        except Exception:
            logger.exception("Error sending %s notification", notification.action.value)

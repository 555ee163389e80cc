"""Reminder evaluation and delivery."""

import logging
from datetime import date
from typing import Callable

from .core.reminders import ReminderEvent, ReminderStatus, pending_reminders
from .core.tasks import Task
from .ports import NotificationChannel
from .repository import PersistenceError, TaskRepository

logger = logging.getLogger(__name__)

NotifyFn = Callable[[Task, ReminderStatus], None]


class Notifier:
    """
    Routes reminders to a system channel when granted, else to a banner.

    Usable directly as the `notify` capability of ReminderEvaluator.
    """

    def __init__(self, system: NotificationChannel | None, banner: NotificationChannel):
        self.system = system
        self.banner = banner

    def prepare(self) -> None:
        """Ask the system channel for permission once, at startup."""
        if self.system is None:
            return
        try:
            self.system.request_permission()
        except Exception as e:
            logger.warning(f"Notification permission request failed: {e}")

    def __call__(self, task: Task, status: ReminderStatus) -> None:
        title = status.headline
        if self.system is not None and self.system.is_granted():
            try:
                self.system.show(title, task.title)
                return
            except Exception as e:
                logger.error(f"System notification failed, falling back to banner: {e}")
        self.banner.show(title, task.title)


class ReminderEvaluator:
    """
    Fires at most one reminder per task while its due condition stands.

    `reminded` is sticky: once set it is never cleared.
    """

    def __init__(self, repository: TaskRepository, notify: NotifyFn):
        self.repository = repository
        self.notify = notify

    def run(self, as_of: date | None = None) -> list[ReminderEvent]:
        """Scan tasks, notify, mark reminded. Returns the delivered events."""
        as_of = as_of or date.today()
        delivered = []

        for event in pending_reminders(self.repository.state.tasks, as_of):
            try:
                self.notify(event.task, event.status)
            except Exception:
                logger.exception(f"Reminder for task {event.task.id} failed; will retry next run")
                continue
            event.task.reminded = True
            delivered.append(event)
            logger.info(f"Reminded task {event.task.id} ({event.status.value})")

        if delivered:
            try:
                self.repository.save()
            except PersistenceError as e:
                logger.warning(f"Reminder flags not persisted: {e}")

        return delivered

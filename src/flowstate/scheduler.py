"""Periodic reminder checks."""

import logging
from datetime import datetime

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .config import Config
from .ports import KeyValueStore
from .reminders import NotifyFn, ReminderEvaluator
from .repository import TaskRepository

logger = logging.getLogger(__name__)


def check_reminders(store: KeyValueStore, notify: NotifyFn, config: Config) -> int:
    """
    Reload state and run one reminder pass.

    State is re-read on every tick so edits made by other commands while
    the scheduler is running are picked up. Returns the number of reminders sent.
    """
    repository = TaskRepository.load(store, fallback_list=config.default_list)
    events = ReminderEvaluator(repository, notify).run(as_of=config.today())
    if events:
        logger.info(f"Sent {len(events)} reminder(s)")
    else:
        logger.debug("No reminders due")
    return len(events)


def setup_scheduler(store: KeyValueStore, notify: NotifyFn, config: Config) -> BlockingScheduler:
    """Set up the reminder job: once at startup, then every interval."""
    if config.timezone:
        scheduler = BlockingScheduler(timezone=config.timezone)
    else:
        scheduler = BlockingScheduler()

    scheduler.add_job(
        check_reminders,
        IntervalTrigger(minutes=config.reminder_interval_minutes),
        args=[store, notify, config],
        id="check_reminders",
        next_run_time=datetime.now(scheduler.timezone),
        max_instances=1,
        coalesce=True,
    )
    logger.info(f"Scheduled reminder check every {config.reminder_interval_minutes} minute(s)")
    return scheduler

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Dict, Any, Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.jobstores.base import JobLookupError
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.triggers.date import DateTrigger

from ..core.config import settings
from ..models.task import Task
from ..utils.time_utils import utc_now, to_utc_isoformat

logger = logging.getLogger(__name__)


def reminder_job_id(task_id: int) -> str:
    return f"task_reminder_{task_id}"


def reminder_run_time(task: Task) -> Optional[datetime]:
    """When the task's reminder fires (naive UTC), or None if it has none"""
    if not task.has_reminder or task.due_date is None or task.reminder_time is None:
        return None
    return task.due_date - timedelta(minutes=task.reminder_time)


class SchedulerService:
    """Service for scheduling task reminders."""

    def __init__(self):
        self.scheduler = None
        self._initialize_scheduler()

    def _initialize_scheduler(self):
        """Initialize the APScheduler instance."""
        jobstores = {
            'default': MemoryJobStore(),
        }
        executors = {
            'default': ThreadPoolExecutor(10),
        }
        job_defaults = {
            'coalesce': True,
            'max_instances': 1
        }

        self.scheduler = AsyncIOScheduler(
            jobstores=jobstores,
            executors=executors,
            job_defaults=job_defaults,
            timezone=timezone.utc
        )
        logger.info("Scheduler service initialized")

    def start(self):
        """Start the scheduler."""
        if self.scheduler and not self.scheduler.running:
            self.scheduler.start()
            logger.info("Scheduler service started")

    def shutdown(self):
        """Shutdown the scheduler."""
        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown()
            logger.info("Scheduler service stopped")

    def schedule_task_reminder(self, task: Task) -> Optional[str]:
        """
        Schedule a one-shot reminder for the task, replacing any earlier one.
        Returns the job id, or None when the task has no reminder in the future.
        """
        run_at = reminder_run_time(task)
        if run_at is None or run_at <= utc_now():
            return None

        job_id = reminder_job_id(task.id)
        self.cancel_task_reminder(task.id)
        self.scheduler.add_job(
            func=self._send_task_reminder,
            trigger=DateTrigger(run_date=run_at, timezone=timezone.utc),
            args=[task.id, task.title, task.due_date],
            id=job_id,
            name=f"Reminder: {task.title}",
            replace_existing=True
        )
        logger.info(f"Reminder for task {task.id} scheduled at {to_utc_isoformat(run_at)}")
        return job_id

    def cancel_task_reminder(self, task_id: int) -> bool:
        """Remove the task's reminder job. Returns False if none was scheduled."""
        try:
            self.scheduler.remove_job(reminder_job_id(task_id))
        except JobLookupError:
            return False
        logger.info(f"Reminder for task {task_id} cancelled")
        return True

    def sync_task_reminder(self, task: Task) -> Optional[str]:
        """Bring the reminder job in line with the task's current state."""
        if not settings.REMINDERS_ENABLED:
            return None
        if task.completed or reminder_run_time(task) is None:
            self.cancel_task_reminder(task.id)
            return None
        return self.schedule_task_reminder(task)

    def get_scheduled_jobs(self) -> List[Dict[str, Any]]:
        """Get list of all scheduled jobs."""
        jobs = []
        for job in self.scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None) or getattr(job.trigger, "run_date", None)
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run_time": next_run.isoformat() if next_run else None,
            })
        return jobs

    def _send_task_reminder(self, task_id: int, title: str, due_date: datetime):
        """Reminder job body. Push delivery is out of scope; the reminder is logged."""
        logger.info(f"Reminder: task {task_id} '{title}' is due at {to_utc_isoformat(due_date)}")


# Global scheduler service instance
scheduler_service = SchedulerService()

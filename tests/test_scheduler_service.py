"""
Tests for task reminder scheduling. The scheduler is never started, so jobs
stay pending and nothing fires.
"""
from datetime import datetime, timedelta, timezone

import pytest

from questboard.core.config import settings
from questboard.models import Task
from questboard.services.scheduler_service import (
    SchedulerService,
    reminder_job_id,
    reminder_run_time,
)
from questboard.utils.time_utils import utc_now


@pytest.fixture
def scheduler():
    return SchedulerService()


def reminder_task(task_id=7, due_in=timedelta(days=1), minutes_before=30, **extra):
    return Task(
        id=task_id,
        title="Submit taxes",
        due_date=utc_now() + due_in,
        has_reminder=True,
        reminder_time=minutes_before,
        completed=False,
        **extra
    )


class TestReminderRunTime:

    def test_offset_from_due_date(self):
        task = Task(id=1, title="t", due_date=datetime(2030, 1, 1, 12, 0), has_reminder=True, reminder_time=90)
        assert reminder_run_time(task) == datetime(2030, 1, 1, 10, 30)

    @pytest.mark.parametrize("fields", [
        {"has_reminder": False, "reminder_time": 10, "due_date": datetime(2030, 1, 1)},
        {"has_reminder": True, "reminder_time": None, "due_date": datetime(2030, 1, 1)},
        {"has_reminder": True, "reminder_time": 10, "due_date": None},
    ])
    def test_no_reminder(self, fields):
        assert reminder_run_time(Task(id=1, title="t", **fields)) is None


class TestScheduleTaskReminder:

    def test_future_reminder_scheduled(self, scheduler):
        task = reminder_task()

        job_id = scheduler.schedule_task_reminder(task)

        assert job_id == reminder_job_id(task.id) == "task_reminder_7"
        job = scheduler.scheduler.get_job(job_id)
        expected = (task.due_date - timedelta(minutes=30)).replace(tzinfo=timezone.utc)
        assert job.trigger.run_date == expected
        assert [j["id"] for j in scheduler.get_scheduled_jobs()] == [job_id]

    def test_past_reminder_skipped(self, scheduler):
        task = reminder_task(due_in=timedelta(minutes=10), minutes_before=60)

        assert scheduler.schedule_task_reminder(task) is None
        assert scheduler.get_scheduled_jobs() == []

    def test_rescheduling_replaces_job(self, scheduler):
        task = reminder_task()
        scheduler.schedule_task_reminder(task)
        task.reminder_time = 120

        scheduler.schedule_task_reminder(task)

        jobs = scheduler.scheduler.get_jobs()
        assert len(jobs) == 1
        assert jobs[0].trigger.run_date == (task.due_date - timedelta(minutes=120)).replace(tzinfo=timezone.utc)

    def test_cancel(self, scheduler):
        task = reminder_task()
        scheduler.schedule_task_reminder(task)

        assert scheduler.cancel_task_reminder(task.id) is True
        assert scheduler.cancel_task_reminder(task.id) is False


class TestSyncTaskReminder:

    def test_completed_task_cancels(self, scheduler):
        task = reminder_task()
        scheduler.sync_task_reminder(task)
        task.completed = True

        assert scheduler.sync_task_reminder(task) is None
        assert scheduler.get_scheduled_jobs() == []

    def test_reminder_removed_cancels(self, scheduler):
        task = reminder_task()
        scheduler.sync_task_reminder(task)
        task.has_reminder = False

        scheduler.sync_task_reminder(task)

        assert scheduler.get_scheduled_jobs() == []

    def test_disabled(self, scheduler, monkeypatch):
        monkeypatch.setattr(settings, "REMINDERS_ENABLED", False)
        assert scheduler.sync_task_reminder(reminder_task()) is None
        assert scheduler.get_scheduled_jobs() == []

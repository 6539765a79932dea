"""
Task lifecycle: creation, edits, and the completion transition that drives
scoring and achievement evaluation.
"""
import logging
from datetime import date, datetime, time
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from questboard.core.exceptions import NotFoundException, ValidationException
from questboard.core.locks import user_lock
from questboard.models.achievement import Achievement
from questboard.models.task import Task, TASK_STATUSES
from questboard.models.user import User
from questboard.schemas.task import TaskCreate, TaskUpdate, StatsResponse
from questboard.services.achievement_service import achievement_service
from questboard.services.scheduler_service import scheduler_service
from questboard.services.score_service import score_service, calculate_task_points
from questboard.services.storage_service import storage_service
from questboard.utils.time_utils import utc_now

logger = logging.getLogger(__name__)

# Fields an update may set to null; a null for any other field is ignored
CLEARABLE_TASK_FIELDS = ("description", "due_date", "category_id", "reminder_time")


def merge_due_date(due_date: Optional[date], due_time: Optional[str] = None) -> Optional[datetime]:
    """
    Combine a calendar date and an optional HH:MM time into one timestamp.
    Without a time the result is midnight of that date.
    """
    if due_date is None:
        return None
    if isinstance(due_date, datetime):
        due_date = due_date.date()
    if not due_time:
        return datetime.combine(due_date, time.min)
    try:
        hours, minutes = (int(part) for part in due_time.split(":"))
        return datetime.combine(due_date, time(hour=hours, minute=minutes))
    except ValueError:
        raise ValidationException("due_time", f"'{due_time}' is not a valid HH:MM time") from None


class TaskService:
    """Service for task operations"""

    def get_task(self, db: Session, task_id: int) -> Task:
        task = storage_service.get_task(db, task_id)
        if not task:
            raise NotFoundException("Task", task_id)
        return task

    def list_tasks(self, db: Session, status: Optional[str] = None) -> List[Task]:
        return storage_service.get_all_tasks(db, status)

    def create_task(
        self,
        db: Session,
        task_data: TaskCreate,
        default_user_id: Optional[int] = None
    ) -> Task:
        """Create a task. A task created as complete is scored like a completion."""
        fields = task_data.model_dump(exclude={"due_date", "due_time", "status"})
        fields["due_date"] = merge_due_date(task_data.due_date, task_data.due_time)
        task = storage_service.create_task(db, **fields)
        logger.info(f"Created task {task.id}: {task.title}")

        if task_data.status == "complete":
            task, _, _ = self.set_task_status(db, task.id, "complete", default_user_id)
        else:
            scheduler_service.sync_task_reminder(task)
        return task

    def update_task(
        self,
        db: Session,
        task_id: int,
        task_update: TaskUpdate,
        default_user_id: Optional[int] = None
    ) -> Task:
        """
        Apply a partial update. Plain fields pass through; a status change
        goes through set_task_status.
        """
        task = self.get_task(db, task_id)
        changes = {
            field: value
            for field, value in task_update.model_dump(exclude_unset=True).items()
            if value is not None or field in CLEARABLE_TASK_FIELDS
        }
        new_status = changes.pop("status", None)
        due_time = changes.pop("due_time", None)

        # due_time alone does not move an existing due date
        if "due_date" in changes:
            changes["due_date"] = merge_due_date(changes["due_date"], due_time)

        if changes:
            task = storage_service.update_task(db, task, changes)

        if new_status is not None:
            task, _, _ = self.set_task_status(db, task_id, new_status, default_user_id)
        else:
            scheduler_service.sync_task_reminder(task)
        return task

    def delete_task(self, db: Session, task_id: int) -> None:
        if not storage_service.delete_task(db, task_id):
            raise NotFoundException("Task", task_id)
        scheduler_service.cancel_task_reminder(task_id)
        logger.info(f"Deleted task {task_id}")

    def set_task_status(
        self,
        db: Session,
        task_id: int,
        new_status: str,
        default_user_id: Optional[int] = None
    ) -> Tuple[Task, int, List[Achievement]]:
        """
        Move a task to ``complete`` or ``incomplete``.

        Entering ``complete`` stamps completed_at and credits the task's points
        and any newly met achievements before returning. Leaving it clears the
        completion fields but keeps points already credited, so a task that is
        reopened and completed again is scored again.

        Returns: (task, points_awarded, achievements_unlocked)
        """
        if new_status not in TASK_STATUSES:
            raise ValidationException("status", f"must be one of {list(TASK_STATUSES)}")

        task = self.get_task(db, task_id)

        if new_status == "incomplete":
            task = storage_service.update_task(db, task, {
                "status": "incomplete",
                "completed": False,
                "completed_at": None,
            })
            scheduler_service.sync_task_reminder(task)
            return task, 0, []

        if task.status == "complete":
            return task, 0, []

        task = storage_service.update_task(db, task, {
            "status": "complete",
            "completed": True,
            "completed_at": utc_now(),
        })
        scheduler_service.cancel_task_reminder(task.id)
        logger.info(f"Task {task.id} completed")

        points, unlocked = self._score_completion(db, task, default_user_id)
        return task, points, unlocked

    def _score_completion(
        self,
        db: Session,
        task: Task,
        default_user_id: Optional[int]
    ) -> Tuple[int, List[Achievement]]:
        """Credit the completion and evaluate achievements as one unit per user."""
        user_id = score_service.resolve_user_id(task, default_user_id)
        if user_id is None:
            logger.warning(f"Task {task.id} completed without an owner or default user; no points credited")
            return 0, []

        with user_lock(user_id):
            user = score_service.award_completion(db, task, default_user_id)
            if user is None:
                return 0, []
            # Unowned tasks are credited to the default actor, so they are part of its history
            unlocked = achievement_service.evaluate_after_completion(
                db, user_id, include_unowned=user_id == default_user_id
            )
        return calculate_task_points(task), unlocked

    def get_task_owner(self, db: Session, task: Task, default_user_id: Optional[int] = None) -> Optional[User]:
        """The user a task's points go to, if that user exists"""
        user_id = score_service.resolve_user_id(task, default_user_id)
        if user_id is None:
            return None
        return storage_service.get_user(db, user_id)

    def get_stats(self, db: Session) -> StatsResponse:
        """Aggregate counts across all tasks"""
        return StatsResponse(
            total_tasks=len(storage_service.get_all_tasks(db)),
            due_today=len(storage_service.get_tasks_due_today(db)),
            completed=len(storage_service.get_completed_tasks(db)),
            high_priority=len(storage_service.get_high_priority_tasks(db)),
        )


task_service = TaskService()

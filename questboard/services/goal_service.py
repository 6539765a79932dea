"""
Goal service: goal CRUD and turning roadmaps into tasks
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from questboard.core.exceptions import NotFoundException, ValidationException
from questboard.models.goal import Goal
from questboard.models.task import Task, TASK_PRIORITIES, TASK_DIFFICULTIES
from questboard.schemas.goal import GoalCreate, GoalUpdate
from questboard.services.roadmap_service import RoadmapService, roadmap_service as default_roadmap_service
from questboard.services.storage_service import storage_service

logger = logging.getLogger(__name__)

# Fields an update may set to null; a null for any other field is ignored
CLEARABLE_GOAL_FIELDS = ("description", "completed_at")


def initial_roadmap_tasks(roadmap: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Task fields for the first milestone of a roadmap.

    Error roadmaps and malformed entries yield nothing; unknown priority or
    difficulty values fall back to medium/normal.
    """
    if not isinstance(roadmap, dict) or "error" in roadmap:
        return []
    milestones = roadmap.get("milestones")
    if not isinstance(milestones, list) or not milestones or not isinstance(milestones[0], dict):
        return []

    tasks = []
    for item in milestones[0].get("tasks") or []:
        if not isinstance(item, dict):
            continue
        title = str(item.get("title") or "").strip()
        if not title:
            continue
        priority = str(item.get("priority") or "").lower()
        difficulty = str(item.get("difficulty") or "").lower()
        tasks.append({
            "title": title[:255],
            "description": item.get("description") or None,
            "priority": priority if priority in TASK_PRIORITIES else "medium",
            "difficulty": difficulty if difficulty in TASK_DIFFICULTIES else "normal",
        })
    return tasks


class GoalService:
    """Service for goal operations"""

    def __init__(self, roadmap_service: Optional[RoadmapService] = None):
        self.roadmap_service = roadmap_service or default_roadmap_service

    def get_goal(self, db: Session, goal_id: int) -> Goal:
        goal = storage_service.get_goal(db, goal_id)
        if not goal:
            raise NotFoundException("Goal", goal_id)
        return goal

    def list_goals(self, db: Session, user_id: Optional[int] = None) -> List[Goal]:
        if user_id is not None:
            return storage_service.get_goals_by_user(db, user_id)
        return storage_service.get_all_goals(db)

    def create_goal(
        self,
        db: Session,
        goal_data: GoalCreate,
        default_user_id: Optional[int] = None
    ) -> Goal:
        """Store a goal and, if requested, generate its roadmap and first tasks"""
        user_id = goal_data.user_id if goal_data.user_id is not None else default_user_id
        if user_id is None:
            raise ValidationException("user_id", "is required")
        if not storage_service.get_user(db, user_id):
            raise NotFoundException("User", user_id)

        goal = storage_service.create_goal(
            db,
            user_id=user_id,
            **goal_data.model_dump(exclude={"user_id", "generate_roadmap"})
        )
        logger.info(f"Created goal {goal.id} for user {user_id}: {goal.title}")

        if goal_data.generate_roadmap:
            goal = self.regenerate_roadmap(db, goal.id)
        return goal

    def regenerate_roadmap(self, db: Session, goal_id: int) -> Goal:
        """
        Ask the roadmap service for a fresh roadmap and store it.
        New first-milestone tasks are created only when the roadmap is usable.
        """
        goal = self.get_goal(db, goal_id)
        roadmap = self.roadmap_service.generate_roadmap(goal)
        goal = storage_service.update_goal(db, goal, {"roadmap": roadmap})

        if "error" in roadmap:
            logger.warning(f"Roadmap for goal {goal.id} unavailable: {roadmap['error']}")
            return goal

        created = self.materialize_tasks(db, goal)
        logger.info(f"Created {len(created)} tasks from roadmap of goal {goal.id}")
        return goal

    def materialize_tasks(self, db: Session, goal: Goal) -> List[Task]:
        return [
            storage_service.create_task(
                db,
                user_id=goal.user_id,
                goal_id=goal.id,
                is_goal_task=True,
                **fields
            )
            for fields in initial_roadmap_tasks(goal.roadmap)
        ]

    def update_goal(self, db: Session, goal_id: int, goal_update: GoalUpdate) -> Goal:
        goal = self.get_goal(db, goal_id)
        changes = {
            field: value
            for field, value in goal_update.model_dump(exclude_unset=True).items()
            if value is not None or field in CLEARABLE_GOAL_FIELDS
        }
        if not changes:
            return goal
        return storage_service.update_goal(db, goal, changes)

    def delete_goal(self, db: Session, goal_id: int) -> None:
        if not storage_service.delete_goal(db, goal_id):
            raise NotFoundException("Goal", goal_id)
        logger.info(f"Deleted goal {goal_id}")

    def get_goal_tasks(self, db: Session, goal_id: int) -> List[Task]:
        self.get_goal(db, goal_id)
        return storage_service.get_goal_tasks(db, goal_id)

    def get_productivity_tips(self, db: Session, user_id: Optional[int] = None) -> List[str]:
        """Tips based on the current task load and the user's goals"""
        goals = self.list_goals(db, user_id)
        context = {
            "recent_tasks": len(storage_service.get_all_tasks(db)),
            "completed_tasks": len(storage_service.get_completed_tasks(db)),
            "overdue_count": len(storage_service.get_overdue_tasks(db)),
            "high_priority_count": len(storage_service.get_high_priority_tasks(db)),
            "goals": [g.title for g in goals],
        }
        return self.roadmap_service.generate_productivity_tips(context)


goal_service = GoalService()

"""
Entity store: CRUD and filter queries over the Questboard models.

Every method takes the request's Session; the service holds no state of its own.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Set

from sqlalchemy import or_, text
from sqlalchemy.orm import Session

from questboard.core.config import settings
from questboard.models.achievement import Achievement, UserAchievement
from questboard.models.category import Category
from questboard.models.goal import Goal
from questboard.models.task import Task
from questboard.models.user import User
from questboard.utils.time_utils import utc_now

logger = logging.getLogger(__name__)


DEFAULT_CATEGORIES = [
    {"name": "Work", "color": "#8b5cf6"},
    {"name": "Personal", "color": "#3b82f6"},
    {"name": "Health", "color": "#10b981"},
]

DEFAULT_ACHIEVEMENTS = [
    {"name": "First Task Complete", "description": "Complete your first task", "icon": "🏆", "points": 10, "requirement": 1, "category": "completion"},
    {"name": "High Achiever", "description": "Complete 10 tasks", "icon": "🌟", "points": 25, "requirement": 10, "category": "completion"},
    {"name": "Priority Master", "description": "Complete 5 high-priority tasks", "icon": "⚡", "points": 30, "requirement": 5, "category": "priority"},
]


class StorageService:
    """Key-indexed store for users, categories, tasks, goals and achievements"""

    def _save(self, db: Session, entity):
        db.add(entity)
        db.commit()
        db.refresh(entity)
        return entity

    def _apply(self, db: Session, entity, changes: Dict[str, Any]):
        for field, value in changes.items():
            setattr(entity, field, value)
        db.commit()
        db.refresh(entity)
        return entity

    def _delete(self, db: Session, entity) -> bool:
        if entity is None:
            return False
        db.delete(entity)
        db.commit()
        return True

    # Users

    def get_user(self, db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    def get_user_by_username(self, db: Session, username: str) -> Optional[User]:
        return db.query(User).filter(User.username == username).first()

    def get_all_users(self, db: Session) -> List[User]:
        """All users in creation order"""
        return db.query(User).order_by(User.id).all()

    def create_user(self, db: Session, **fields) -> User:
        return self._save(db, User(**fields))

    def update_user(self, db: Session, user: User, changes: Dict[str, Any]) -> User:
        return self._apply(db, user, changes)

    # Categories

    def get_all_categories(self, db: Session) -> List[Category]:
        return db.query(Category).order_by(Category.id).all()

    def get_category(self, db: Session, category_id: int) -> Optional[Category]:
        return db.query(Category).filter(Category.id == category_id).first()

    def create_category(self, db: Session, **fields) -> Category:
        return self._save(db, Category(**fields))

    def update_category(self, db: Session, category: Category, changes: Dict[str, Any]) -> Category:
        return self._apply(db, category, changes)

    def delete_category(self, db: Session, category_id: int) -> bool:
        return self._delete(db, self.get_category(db, category_id))

    # Tasks

    def get_all_tasks(self, db: Session, status: Optional[str] = None) -> List[Task]:
        query = db.query(Task)
        if status:
            query = query.filter(Task.status == status)
        return query.order_by(Task.id).all()

    def get_task(self, db: Session, task_id: int) -> Optional[Task]:
        return db.query(Task).filter(Task.id == task_id).first()

    def get_tasks_by_user(self, db: Session, user_id: int, include_unowned: bool = False) -> List[Task]:
        """Tasks owned by ``user_id``; ``include_unowned`` adds tasks with no owner"""
        condition = Task.user_id == user_id
        if include_unowned:
            condition = or_(condition, Task.user_id.is_(None))
        return db.query(Task).filter(condition).order_by(Task.id).all()

    def get_tasks_by_category(self, db: Session, category_id: int) -> List[Task]:
        return db.query(Task).filter(Task.category_id == category_id).order_by(Task.id).all()

    def create_task(self, db: Session, **fields) -> Task:
        return self._save(db, Task(**fields))

    def update_task(self, db: Session, task: Task, changes: Dict[str, Any]) -> Task:
        return self._apply(db, task, changes)

    def delete_task(self, db: Session, task_id: int) -> bool:
        return self._delete(db, self.get_task(db, task_id))

    def get_tasks_due_today(self, db: Session, now: Optional[datetime] = None) -> List[Task]:
        """Tasks whose due date falls on the current (UTC) calendar day"""
        today = (now or utc_now()).replace(hour=0, minute=0, second=0, microsecond=0)
        tomorrow = today + timedelta(days=1)
        return db.query(Task).filter(
            Task.due_date.isnot(None),
            Task.due_date >= today,
            Task.due_date < tomorrow
        ).order_by(Task.id).all()

    def get_high_priority_tasks(self, db: Session) -> List[Task]:
        return db.query(Task).filter(Task.priority == "high").order_by(Task.id).all()

    def get_completed_tasks(self, db: Session) -> List[Task]:
        return db.query(Task).filter(
            or_(Task.completed.is_(True), Task.status == "complete")
        ).order_by(Task.id).all()

    def get_overdue_tasks(self, db: Session, now: Optional[datetime] = None) -> List[Task]:
        return db.query(Task).filter(
            Task.due_date.isnot(None),
            Task.due_date < (now or utc_now()),
            Task.completed.is_(False)
        ).order_by(Task.id).all()

    def get_goal_tasks(self, db: Session, goal_id: int) -> List[Task]:
        return db.query(Task).filter(Task.goal_id == goal_id).order_by(Task.id).all()

    # Goals

    def get_all_goals(self, db: Session) -> List[Goal]:
        return db.query(Goal).order_by(Goal.id).all()

    def get_goal(self, db: Session, goal_id: int) -> Optional[Goal]:
        return db.query(Goal).filter(Goal.id == goal_id).first()

    def get_goals_by_user(self, db: Session, user_id: int) -> List[Goal]:
        return db.query(Goal).filter(Goal.user_id == user_id).order_by(Goal.id).all()

    def create_goal(self, db: Session, **fields) -> Goal:
        return self._save(db, Goal(**fields))

    def update_goal(self, db: Session, goal: Goal, changes: Dict[str, Any]) -> Goal:
        return self._apply(db, goal, changes)

    def delete_goal(self, db: Session, goal_id: int) -> bool:
        return self._delete(db, self.get_goal(db, goal_id))

    # Achievements

    def get_all_achievements(self, db: Session) -> List[Achievement]:
        return db.query(Achievement).order_by(Achievement.id).all()

    def get_achievement(self, db: Session, achievement_id: int) -> Optional[Achievement]:
        return db.query(Achievement).filter(Achievement.id == achievement_id).first()

    def create_achievement(self, db: Session, **fields) -> Achievement:
        return self._save(db, Achievement(**fields))

    def get_user_achievements(self, db: Session, user_id: int) -> List[UserAchievement]:
        return db.query(UserAchievement).filter(
            UserAchievement.user_id == user_id
        ).order_by(UserAchievement.id).all()

    def get_user_achievement(self, db: Session, user_id: int, achievement_id: int) -> Optional[UserAchievement]:
        return db.query(UserAchievement).filter(
            UserAchievement.user_id == user_id,
            UserAchievement.achievement_id == achievement_id
        ).first()

    def get_earned_achievement_ids(self, db: Session, user_id: int) -> Set[int]:
        rows = db.query(UserAchievement.achievement_id).filter(
            UserAchievement.user_id == user_id
        ).all()
        return {row[0] for row in rows}

    def create_user_achievement(self, db: Session, user_id: int, achievement_id: int) -> UserAchievement:
        return self._save(db, UserAchievement(
            user_id=user_id,
            achievement_id=achievement_id,
            earned_at=utc_now()
        ))

    # Seeding

    def seed_defaults(self, db: Session) -> Dict[str, int]:
        """Seed default categories, achievements and the default actor if missing"""
        created = {"categories": 0, "achievements": 0, "users": 0}

        if db.query(Category).count() == 0:
            for category_data in DEFAULT_CATEGORIES:
                db.add(Category(**category_data))
                created["categories"] += 1

        for achievement_data in DEFAULT_ACHIEVEMENTS:
            existing = db.query(Achievement).filter(
                Achievement.name == achievement_data["name"]
            ).first()
            if not existing:
                db.add(Achievement(**achievement_data))
                created["achievements"] += 1

        default_user_id = settings.default_user_id
        if settings.SEED_DEFAULT_USER and default_user_id and not self.get_user(db, default_user_id):
            db.add(User(id=default_user_id, username=settings.DEFAULT_USERNAME))
            created["users"] += 1

        if any(created.values()):
            db.commit()
            if created["users"] and db.bind.dialect.name == "postgresql":
                # Explicit ids do not advance the serial sequence
                db.execute(text("SELECT setval(pg_get_serial_sequence('users', 'id'), (SELECT MAX(id) FROM users))"))
                db.commit()
            logger.info(f"Seeded defaults: {created}")
        return created


storage_service = StorageService()

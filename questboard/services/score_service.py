"""
Score service: task point calculation, point credit and levels
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional

from sqlalchemy.orm import Session

from questboard.core.exceptions import NotFoundException, ValidationException
from questboard.core.locks import user_lock
from questboard.models.task import Task, DEFAULT_TASK_POINTS
from questboard.models.user import User

logger = logging.getLogger(__name__)


PRIORITY_MULTIPLIERS = {
    "high": Decimal("1.5"),
    "medium": Decimal("1.0"),
    "low": Decimal("0.8"),
}

DIFFICULTY_MULTIPLIERS = {
    "hard": Decimal("1.5"),
    "normal": Decimal("1.0"),
    "easy": Decimal("0.7"),
}


class Level(str, Enum):
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"
    DIAMOND = "Diamond"


# Inclusive lower bounds, highest first
LEVEL_THRESHOLDS = (
    (1000, Level.DIAMOND),
    (500, Level.PLATINUM),
    (250, Level.GOLD),
    (100, Level.SILVER),
    (0, Level.BRONZE),
)


def level_for(score: int) -> Level:
    """Level for a score: the highest band whose lower bound the score reaches"""
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return Level.BRONZE


def calculate_task_points(task: Task) -> int:
    """
    Points for completing a task.

    base points x priority multiplier x difficulty multiplier, rounded half up
    (22.5 -> 23). Unknown priority/difficulty values count as 1.0.
    """
    base = task.points if task.points is not None else DEFAULT_TASK_POINTS
    priority_mult = PRIORITY_MULTIPLIERS.get(task.priority or "medium", Decimal("1.0"))
    difficulty_mult = DIFFICULTY_MULTIPLIERS.get(task.difficulty or "normal", Decimal("1.0"))
    raw = Decimal(base) * priority_mult * difficulty_mult
    return int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class ScoreService:
    """Service for score operations"""

    def resolve_user_id(self, task: Task, default_user_id: Optional[int] = None) -> Optional[int]:
        """Task owner, else the boundary-supplied default actor"""
        if task.user_id is not None:
            return task.user_id
        return default_user_id

    def add_points(self, db: Session, user_id: int, points: int) -> User:
        """Credit points to a user and recompute the level"""
        if points < 0:
            raise ValidationException("points", "must be non-negative")

        with user_lock(user_id):
            user = db.query(User).filter(User.id == user_id).with_for_update().first()
            if not user:
                raise NotFoundException("User", user_id)

            previous_level = user.level
            user.score = (user.score or 0) + points
            user.level = level_for(user.score).value
            db.commit()
            db.refresh(user)

        if user.level != previous_level:
            logger.info(f"User {user_id} leveled up: {previous_level} -> {user.level} (score {user.score})")
        return user

    def award_completion(
        self,
        db: Session,
        task: Task,
        default_user_id: Optional[int] = None
    ) -> Optional[User]:
        """
        Credit the points for a completed task.
        Returns the updated user, or None when no user can be credited.
        """
        user_id = self.resolve_user_id(task, default_user_id)
        if user_id is None:
            logger.warning(f"Task {task.id} completed without an owner or default user; no points credited")
            return None
        if db.query(User.id).filter(User.id == user_id).first() is None:
            logger.warning(f"Task {task.id} completed for unknown user {user_id}; no points credited")
            return None

        points = calculate_task_points(task)
        user = self.add_points(db, user_id, points)
        logger.info(f"Awarded {points} points to user {user_id} for task {task.id}")
        return user


score_service = ScoreService()

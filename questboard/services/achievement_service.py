"""
Achievement service for evaluating and awarding achievements
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from questboard.core.exceptions import NotFoundException
from questboard.core.locks import user_lock
from questboard.models.achievement import Achievement, UserAchievement
from questboard.models.task import Task
from questboard.schemas.achievement import (
    AchievementCreate,
    AchievementResponse,
    UserAchievementResponse,
    UserAchievementSummary,
)
from questboard.services.score_service import score_service
from questboard.services.storage_service import storage_service

logger = logging.getLogger(__name__)


class AchievementCategory(str, Enum):
    COMPLETION = "completion"
    PRIORITY = "priority"
    STREAK = "streak"


@dataclass(frozen=True)
class TaskStats:
    """Task history figures the unlock rules are evaluated against"""
    completed_count: int = 0
    completed_high_priority_count: int = 0

    @classmethod
    def from_tasks(cls, tasks: Iterable[Task]) -> "TaskStats":
        completed = [t for t in tasks if t.completed]
        return cls(
            completed_count=len(completed),
            completed_high_priority_count=sum(1 for t in completed if t.priority == "high"),
        )


@dataclass(frozen=True)
class AchievementRule:
    """Unlock rule: met once ``metric(stats)`` reaches the achievement's requirement"""
    category: AchievementCategory
    metric: Callable[[TaskStats], int]

    def is_met(self, stats: TaskStats, requirement: int) -> bool:
        return self.metric(stats) >= requirement


# Categories without an entry here (e.g. streak) are never auto-awarded
ACHIEVEMENT_RULES: Dict[AchievementCategory, AchievementRule] = {
    AchievementCategory.COMPLETION: AchievementRule(
        AchievementCategory.COMPLETION, lambda stats: stats.completed_count
    ),
    AchievementCategory.PRIORITY: AchievementRule(
        AchievementCategory.PRIORITY, lambda stats: stats.completed_high_priority_count
    ),
}


def rule_for(category: Optional[str]) -> Optional[AchievementRule]:
    """Unlock rule for an achievement category, or None if it has none"""
    try:
        return ACHIEVEMENT_RULES.get(AchievementCategory(category))
    except ValueError:
        return None


class AchievementService:
    """Service for achievement operations"""

    def get_all_achievements(self, db: Session) -> List[Achievement]:
        """Get all available achievements"""
        return storage_service.get_all_achievements(db)

    def create_achievement(self, db: Session, data: AchievementCreate) -> Achievement:
        return storage_service.create_achievement(db, **data.model_dump())

    def get_user_achievements(self, db: Session, user_id: int) -> List[UserAchievement]:
        """Get the user's unlocked achievements"""
        if not storage_service.get_user(db, user_id):
            raise NotFoundException("User", user_id)
        return storage_service.get_user_achievements(db, user_id)

    def get_user_achievement_summary(self, db: Session, user_id: int) -> UserAchievementSummary:
        """Get summary of user's achievements"""
        all_achievements = self.get_all_achievements(db)
        unlocked = self.get_user_achievements(db, user_id)

        total_points = sum(ua.achievement.points or 0 for ua in unlocked)
        completion = (len(unlocked) / len(all_achievements) * 100) if all_achievements else 0

        return UserAchievementSummary(
            user_id=user_id,
            total_achievements=len(all_achievements),
            unlocked_count=len(unlocked),
            locked_count=max(len(all_achievements) - len(unlocked), 0),
            total_points_earned=total_points,
            completion_percentage=round(completion, 2),
            achievements=[self.to_response(ua) for ua in unlocked]
        )

    def to_response(self, user_achievement: UserAchievement) -> UserAchievementResponse:
        return UserAchievementResponse(
            id=user_achievement.id,
            user_id=user_achievement.user_id,
            achievement=AchievementResponse.model_validate(user_achievement.achievement),
            earned_at=user_achievement.earned_at
        )

    def _grant(self, db: Session, user_id: int, achievement: Achievement) -> UserAchievement:
        """Record the unlock and credit its points. Caller holds the user lock."""
        record = storage_service.create_user_achievement(db, user_id, achievement.id)
        score_service.add_points(db, user_id, achievement.points or 0)
        logger.info(
            f"User {user_id} unlocked achievement '{achievement.name}' (+{achievement.points} points)"
        )
        return record

    def evaluate_after_completion(
        self,
        db: Session,
        user_id: int,
        include_unowned: bool = False
    ) -> List[Achievement]:
        """
        Award every achievement whose rule the user's task history now meets.

        Returns the newly awarded achievements. Running it again on the same
        task state awards nothing. ``include_unowned`` counts tasks with no
        owner, which is how the default actor's tasks are stored.
        """
        newly_awarded: List[Achievement] = []

        with user_lock(user_id):
            tasks = storage_service.get_tasks_by_user(db, user_id, include_unowned=include_unowned)
            stats = TaskStats.from_tasks(tasks)
            earned = storage_service.get_earned_achievement_ids(db, user_id)

            for achievement in self.get_all_achievements(db):
                if achievement.id in earned:
                    continue
                rule = rule_for(achievement.category)
                if rule is None or not rule.is_met(stats, achievement.requirement or 0):
                    continue
                self._grant(db, user_id, achievement)
                earned.add(achievement.id)
                newly_awarded.append(achievement)

        return newly_awarded

    def award_achievement(
        self,
        db: Session,
        user_id: int,
        achievement_id: int
    ) -> Tuple[UserAchievement, bool]:
        """
        Award an achievement directly.
        Returns: (user_achievement, newly_awarded). An existing unlock is
        returned unchanged and its points are not credited again.
        """
        if not storage_service.get_user(db, user_id):
            raise NotFoundException("User", user_id)
        achievement = storage_service.get_achievement(db, achievement_id)
        if not achievement:
            raise NotFoundException("Achievement", achievement_id)

        with user_lock(user_id):
            existing = storage_service.get_user_achievement(db, user_id, achievement_id)
            if existing:
                return existing, False
            return self._grant(db, user_id, achievement), True


achievement_service = AchievementService()

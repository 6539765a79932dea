"""
Leaderboard service for ranking and leaderboard queries
"""
from enum import Enum
from typing import Dict, List, Optional, Union

from sqlalchemy.orm import Session

from questboard.core.exceptions import ValidationException
from questboard.models.user import User, GLOBAL_MARKER
from questboard.schemas.leaderboard import LeaderboardEntry
from questboard.services.storage_service import storage_service


class LeaderboardScope(str, Enum):
    GLOBAL = "global"
    COUNTRY = "country"
    REGION = "region"


def _coerce_scope(scope: Union[LeaderboardScope, str]) -> LeaderboardScope:
    try:
        return LeaderboardScope(scope)
    except ValueError:
        raise ValidationException("scope", f"must be one of {[s.value for s in LeaderboardScope]}") from None


def _group_key(user: User, scope: LeaderboardScope) -> Optional[str]:
    """The user's country/region, or None when it is unset or 'Global'"""
    value = user.country if scope is LeaderboardScope.COUNTRY else user.region
    if not value or value == GLOBAL_MARKER:
        return None
    return value


def _by_score(users: List[User]) -> List[User]:
    # sorted() is stable, so ties keep their incoming order
    return sorted(users, key=lambda u: u.score or 0, reverse=True)


class LeaderboardService:
    """Service for leaderboard operations"""

    def get_leaderboard(
        self,
        db: Session,
        scope: Union[LeaderboardScope, str] = LeaderboardScope.GLOBAL,
        limit: int = 10
    ) -> List[LeaderboardEntry]:
        """
        Top users for a scope.

        Country and region boards take the top ``limit`` of each group, then
        re-rank that union by score and keep the top ``limit`` overall. Ranks
        are positions in the returned list.
        """
        scope = _coerce_scope(scope)
        if limit < 1:
            raise ValidationException("limit", "must be at least 1")

        users = storage_service.get_all_users(db)

        if scope is LeaderboardScope.GLOBAL:
            candidates = users
        else:
            groups: Dict[str, List[User]] = {}
            for user in users:
                key = _group_key(user, scope)
                if key is not None:
                    groups.setdefault(key, []).append(user)

            candidates = []
            for members in groups.values():
                candidates.extend(_by_score(members)[:limit])

        ranked = _by_score(candidates)[:limit]

        return [
            LeaderboardEntry(
                rank=idx + 1,
                user_id=user.id,
                username=user.username,
                score=user.score or 0,
                level=user.level,
                region=user.region,
                country=user.country,
            )
            for idx, user in enumerate(ranked)
        ]

    def get_user_rank(
        self,
        db: Session,
        user_id: int,
        scope: Union[LeaderboardScope, str] = LeaderboardScope.GLOBAL
    ) -> int:
        """1-based rank within the user's own group, or -1 if unknown/out of scope"""
        scope = _coerce_scope(scope)
        user = storage_service.get_user(db, user_id)
        if not user:
            return -1

        users = storage_service.get_all_users(db)
        if scope is not LeaderboardScope.GLOBAL:
            key = _group_key(user, scope)
            if key is None:
                return -1
            users = [u for u in users if _group_key(u, scope) == key]

        for idx, candidate in enumerate(_by_score(users)):
            if candidate.id == user_id:
                return idx + 1
        return -1


leaderboard_service = LeaderboardService()

"""
Tests for ScoreService and the level function.
"""
import pytest

from questboard.core.exceptions import NotFoundException, ValidationException
from questboard.models import Task
from questboard.services.score_service import (
    Level,
    calculate_task_points,
    level_for,
    score_service,
)

LEVEL_ORDER = [Level.BRONZE, Level.SILVER, Level.GOLD, Level.PLATINUM, Level.DIAMOND]


class TestLevelFor:
    """Tests for level_for"""

    @pytest.mark.parametrize("score,level", [
        (0, Level.BRONZE),
        (99, Level.BRONZE),
        (100, Level.SILVER),
        (249, Level.SILVER),
        (250, Level.GOLD),
        (499, Level.GOLD),
        (500, Level.PLATINUM),
        (999, Level.PLATINUM),
        (1000, Level.DIAMOND),
        (50000, Level.DIAMOND),
    ])
    def test_band_boundaries(self, score, level):
        assert level_for(score) == level

    def test_monotonic(self):
        """A higher score never maps to a lower level"""
        previous = 0
        for score in range(0, 1201):
            rank = LEVEL_ORDER.index(level_for(score))
            assert rank >= previous
            previous = rank

    def test_level_compares_as_string(self):
        assert level_for(150) == "Silver"


class TestTaskPointsCalculation:
    """Tests for calculate_task_points"""

    def test_high_priority_hard_task(self):
        """10 x 1.5 x 1.5 = 22.5 rounds up to 23"""
        task = Task(title="t", priority="high", difficulty="hard", points=10)
        assert calculate_task_points(task) == 23

    def test_low_priority_easy_task(self):
        """10 x 0.8 x 0.7 = 5.6 rounds to 6"""
        task = Task(title="t", priority="low", difficulty="easy", points=10)
        assert calculate_task_points(task) == 6

    def test_default_task(self):
        task = Task(title="t", priority="medium", difficulty="normal", points=10)
        assert calculate_task_points(task) == 10

    def test_high_priority_easy_rounds_half_up(self):
        """10 x 1.5 x 0.7 = 10.5 -> 11"""
        task = Task(title="t", priority="high", difficulty="easy", points=10)
        assert calculate_task_points(task) == 11

    def test_unset_fields_use_defaults(self):
        """An unsaved task with nothing set scores as base 10, medium, normal"""
        assert calculate_task_points(Task(title="t")) == 10

    def test_custom_base_points(self):
        task = Task(title="t", priority="low", difficulty="hard", points=40)
        # 40 x 0.8 x 1.5 = 48
        assert calculate_task_points(task) == 48


class TestAddPoints:
    """Tests for the point-credit path"""

    def test_credits_score_and_recomputes_level(self, db_session, make_user):
        user = make_user("alice", score=90)

        updated = score_service.add_points(db_session, user.id, 15)

        assert updated.score == 105
        assert updated.level == "Silver"

    def test_unknown_user(self, db_session):
        with pytest.raises(NotFoundException):
            score_service.add_points(db_session, 404, 10)

    def test_negative_points_rejected(self, db_session, make_user):
        user = make_user("alice", score=50)

        with pytest.raises(ValidationException):
            score_service.add_points(db_session, user.id, -5)

        db_session.refresh(user)
        assert user.score == 50


class TestAwardCompletion:
    """Tests for award_completion user resolution"""

    def test_credits_task_owner(self, db_session, make_user, make_task):
        owner = make_user("owner")
        make_user("other")
        task = make_task(owner, priority="high", difficulty="hard")

        user = score_service.award_completion(db_session, task, default_user_id=2)

        assert user.id == owner.id
        assert user.score == 23

    def test_falls_back_to_default_user(self, db_session, make_user, make_task):
        default_user = make_user("guest")
        task = make_task(None)

        user = score_service.award_completion(db_session, task, default_user_id=default_user.id)

        assert user.id == default_user.id
        assert user.score == 10

    def test_no_owner_and_no_default(self, db_session, make_task):
        task = make_task(None)
        assert score_service.award_completion(db_session, task, default_user_id=None) is None

    def test_default_user_missing(self, db_session, make_task):
        task = make_task(None)
        assert score_service.award_completion(db_session, task, default_user_id=77) is None

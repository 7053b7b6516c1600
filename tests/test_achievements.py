"""
Tests for the Achievement Evaluator

Tests cover:
- Exactly-once unlocks per (student, type)
- Milestones against stored totals
- Savepoint isolation of evaluation failures
"""

from datetime import date

from linguaboard_app import db
from linguaboard_app.modules.gamification.models import (
    Achievement,
    CompletedActivity,
    LearningStreak,
    PointTransaction,
)
from linguaboard_app.modules.gamification.services.achievement_service import AchievementService
from linguaboard_app.modules.gamification.services.award_engine import AwardEngine
from linguaboard_app.modules.gamification.services.streak_service import StreakService
from linguaboard_app.modules.gamification.services.transaction_log import TransactionLog

TODAY = date(2024, 3, 10)


def quiz(reference_id, score=None, student_id=1):
    metadata = {'score': score} if score is not None else None
    return AwardEngine.award_points(
        student_id, 'COMPLETE_QUIZ', reference_id=reference_id, reference_kind='quiz',
        metadata=metadata, today=TODAY
    )


class TestUniqueness:

    def test_first_quiz_only_once(self, app):
        quiz('Q1', 100)
        quiz('Q2', 100)
        quiz('Q3', 90)

        counts = {
            kind: Achievement.query.filter_by(student_id=1, achievement_type=kind).count()
            for kind in ('first_quiz', 'quiz_perfectionist')
        }
        assert counts == {'first_quiz': 1, 'quiz_perfectionist': 1}

    def test_students_unlock_independently(self, app):
        quiz('Q1', student_id=1)
        quiz('Q1', student_id=2)

        assert Achievement.query.filter_by(achievement_type='first_quiz').count() == 2

    def test_unlock_row_contents(self, app):
        quiz('Q1', 100)

        achievement = Achievement.query.filter_by(achievement_type='quiz_perfectionist').one()
        assert achievement.title == 'Perfectionist'
        assert achievement.icon == '💯'
        assert achievement.points_earned == 50
        assert achievement.description == 'Scored 100% on a quiz!'


class TestMilestones:

    def test_milestones_use_stored_total(self, app):
        db.session.add(LearningStreak(
            student_id=3, current_streak=1, longest_streak=1,
            last_activity_date=TODAY, total_points=600
        ))
        db.session.commit()

        unlocked = AchievementService.check_achievements(3, 'COMPLETE_VOCABULARY')
        db.session.commit()

        assert {a.achievement_type for a in unlocked} == {'points_milestone_100', 'points_milestone_500'}
        streak = LearningStreak.query.filter_by(student_id=3).one()
        assert streak.total_points == 660
        assert PointTransaction.query.filter_by(student_id=3, activity_type='EARN_ACHIEVEMENT').count() == 2

    def test_no_streak_row_no_milestones(self, app):
        unlocked = AchievementService.check_achievements(4, 'COMPLETE_GAME')

        assert unlocked == []


class TestFailureIsolation:
    """A failing evaluation must not roll back the award itself."""

    def test_evaluator_exception_keeps_award(self, app, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError('achievement store unavailable')

        monkeypatch.setattr(AchievementService, 'check_achievements', staticmethod(boom))

        assert quiz('Q1', 100) == 30

        assert CompletedActivity.query.count() == 1
        assert Achievement.query.count() == 0
        assert LearningStreak.query.one().total_points == 30

    def test_partial_unlock_is_rolled_back(self, app, monkeypatch):
        """A failure after the achievement row was written discards the whole evaluation."""
        def failing_bonus(student_id, points):
            raise RuntimeError('cannot update total')

        monkeypatch.setattr(StreakService, 'add_bonus_points', staticmethod(failing_bonus))

        assert quiz('Q1', 100) == 30

        assert Achievement.query.count() == 0
        assert PointTransaction.query.filter_by(activity_type='EARN_ACHIEVEMENT').count() == 0
        streak = LearningStreak.query.one()
        assert streak.total_points == 30
        assert TransactionLog.sum_for_student(1) == streak.total_points

    def test_later_award_recovers(self, app, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError('temporary failure')

        monkeypatch.setattr(AchievementService, 'check_achievements', staticmethod(boom))
        quiz('Q1')
        monkeypatch.undo()

        quiz('Q2')

        assert Achievement.query.filter_by(achievement_type='first_quiz').count() == 1

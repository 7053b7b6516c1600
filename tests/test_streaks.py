"""
Tests for the Streak Tracker
"""

from datetime import date, timedelta

from linguaboard_app import db
from linguaboard_app.modules.gamification.models import Achievement, LearningStreak, PointTransaction
from linguaboard_app.modules.gamification.services.award_engine import AwardEngine
from linguaboard_app.modules.gamification.services.streak_service import StreakService
from linguaboard_app.modules.gamification.services.transaction_log import TransactionLog

TODAY = date(2024, 3, 10)
STUDENT = 7


def practice(day, student_id=STUDENT):
    """A vocabulary drill without reference: 5 points, no activity achievement."""
    return AwardEngine.award_points(student_id, 'COMPLETE_VOCABULARY', today=day)


def streak_of(student_id=STUDENT):
    return LearningStreak.query.filter_by(student_id=student_id).one()


class TestStreakContinuity:

    def test_consecutive_days(self, app):
        for offset in range(3):
            practice(TODAY + timedelta(days=offset))

        streak = streak_of()
        assert streak.current_streak == 3
        assert streak.longest_streak == 3
        assert streak.last_activity_date == TODAY + timedelta(days=2)

    def test_gap_resets_current(self, app):
        practice(TODAY)
        practice(TODAY + timedelta(days=1))
        practice(TODAY + timedelta(days=4))

        streak = streak_of()
        assert streak.current_streak == 1
        assert streak.longest_streak == 2

    def test_same_day_is_idempotent_for_counters(self, app):
        practice(TODAY)
        practice(TODAY)
        practice(TODAY)

        streak = streak_of()
        assert streak.current_streak == 1
        assert streak.longest_streak == 1
        assert streak.total_points == 15

    def test_future_last_activity_date_resets(self, app):
        db.session.add(LearningStreak(
            student_id=STUDENT, current_streak=4, longest_streak=4,
            last_activity_date=TODAY + timedelta(days=2), total_points=0
        ))
        db.session.commit()

        practice(TODAY)

        streak = streak_of()
        assert streak.current_streak == 1
        assert streak.longest_streak == 4
        assert streak.last_activity_date == TODAY


class TestStreakAchievements:

    def test_week_warrior_after_seven_days(self, app):
        for offset in range(7):
            practice(TODAY + timedelta(days=offset))

        assert Achievement.query.filter_by(student_id=STUDENT, achievement_type='streak_7_days').count() == 1

        tx = PointTransaction.query.filter_by(activity_type='EARN_ACHIEVEMENT').filter(
            PointTransaction.description == 'Achievement unlocked: Week Warrior'
        ).one()
        assert tx.points_change == 100
        assert tx.reference_kind == 'achievement'
        assert tx.extra_data == {'achievement_type': 'streak_7_days'}

        # 7 x 5 points, +100 streak bonus, then the 100-point milestone (+10)
        assert streak_of().total_points == 145
        assert TransactionLog.sum_for_student(STUDENT) == 145

    def test_checked_only_when_streak_grows(self, app):
        db.session.add(LearningStreak(
            student_id=STUDENT, current_streak=7, longest_streak=7,
            last_activity_date=TODAY, total_points=0
        ))
        db.session.commit()

        practice(TODAY)
        assert Achievement.query.filter_by(achievement_type='streak_7_days').count() == 0

        practice(TODAY + timedelta(days=1))
        assert streak_of().current_streak == 8
        assert Achievement.query.filter_by(achievement_type='streak_7_days').count() == 1


class TestBonusPoints:

    def test_add_bonus_points_leaves_dates(self, app):
        practice(TODAY)

        StreakService.add_bonus_points(STUDENT, 40)
        db.session.commit()

        streak = streak_of()
        assert streak.total_points == 45
        assert streak.current_streak == 1
        assert streak.last_activity_date == TODAY

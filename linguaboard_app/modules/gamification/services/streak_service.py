# File: linguaboard_app/modules/gamification/services/streak_service.py
"""
Streak Service
==============
Manages student learning streaks (consecutive calendar days of activity)
and the denormalized running total of points kept on the same row.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from linguaboard_app.extensions import db
from linguaboard_app.utils.time_utils import local_today
from ..logics.streak_logic import next_streak_state, start_streak
from ..models import Achievement, LearningStreak


@dataclass
class StreakBump:
    streak: LearningStreak
    increased: bool
    unlocked: List[Achievement] = field(default_factory=list)


class StreakService:
    """Service for managing student activity streaks."""

    @staticmethod
    def get_student_streak(student_id: int) -> Optional[LearningStreak]:
        """Get the streak record for a student."""
        return LearningStreak.query.filter_by(student_id=student_id).first()

    @staticmethod
    def lock_streak_row(student_id: int) -> Optional[LearningStreak]:
        """Load the student's streak row with SELECT ... FOR UPDATE (no-op on SQLite)."""
        return LearningStreak.query.filter_by(student_id=student_id)\
            .with_for_update().populate_existing().first()

    @staticmethod
    def get_or_create_streak(student_id: int) -> LearningStreak:
        """Get or create a streak record for a student."""
        streak = StreakService.get_student_streak(student_id)
        if not streak:
            streak = LearningStreak(
                student_id=student_id,
                current_streak=0,
                longest_streak=0,
                total_points=0
            )
            db.session.add(streak)
        return streak

    @staticmethod
    def bump(student_id: int, points_earned: int, today: Optional[date] = None) -> StreakBump:
        """
        Register activity for ``today`` and add ``points_earned`` to the total.

        Streak achievements are evaluated after the row is created or whenever
        current_streak grows.
        """
        from .achievement_service import AchievementService

        today = today or local_today()
        streak = StreakService.get_student_streak(student_id)

        if streak is None:
            state = start_streak(today)
            streak = LearningStreak(
                student_id=student_id,
                current_streak=state.current_streak,
                longest_streak=state.longest_streak,
                last_activity_date=state.last_activity_date,
                total_points=points_earned
            )
            db.session.add(streak)
        else:
            state = next_streak_state(
                streak.current_streak,
                streak.longest_streak,
                streak.last_activity_date,
                today
            )
            streak.current_streak = state.current_streak
            streak.longest_streak = state.longest_streak
            streak.last_activity_date = state.last_activity_date
            streak.total_points = (streak.total_points or 0) + points_earned

        result = StreakBump(streak=streak, increased=state.increased)
        if state.increased:
            result.unlocked = AchievementService.run_isolated(
                student_id,
                lambda: AchievementService.check_streak_achievements(student_id, state.current_streak)
            )
        return result

    @staticmethod
    def add_bonus_points(student_id: int, points: int) -> LearningStreak:
        """Adjust total_points only; streak dates are left untouched."""
        streak = StreakService.get_or_create_streak(student_id)
        streak.total_points = (streak.total_points or 0) + points
        return streak

"""
Achievement Service
Mở khóa thành tích đúng một lần cho mỗi học viên và cộng điểm thưởng.
"""
from typing import Any, Callable, List

from flask import current_app
from sqlalchemy.exc import IntegrityError

from linguaboard_app.extensions import db
from linguaboard_app.utils.time_utils import utcnow
from ..logics.achievement_rules import (
    ACHIEVEMENT_DEFINITIONS,
    activity_achievements,
    milestone_achievements,
    streak_achievements,
)
from ..logics.points_rules import ActivityType
from ..models import Achievement, LearningStreak
from .transaction_log import TransactionLog


class AchievementService:
    """Evaluates and awards achievements."""

    @staticmethod
    def owned_types(student_id: int) -> set:
        rows = db.session.query(Achievement.achievement_type)\
            .filter(Achievement.student_id == student_id).all()
        return {row.achievement_type for row in rows}

    @staticmethod
    def run_isolated(student_id: int, evaluate: Callable[[], List[Achievement]]) -> List[Achievement]:
        """
        Run an evaluation inside a SAVEPOINT.

        A failure rolls back only the savepoint and is logged; the caller's
        award stays intact. Pending work is flushed first so that its own
        errors are not mistaken for achievement failures.
        """
        db.session.flush()
        try:
            with db.session.begin_nested():
                return evaluate()
        except Exception as e:
            current_app.logger.error(
                f"Lỗi khi kiểm tra thành tích cho học viên {student_id}: {e}", exc_info=True
            )
            return []

    @staticmethod
    def check_achievements(student_id: int, activity_type: str, metadata: Any = None) -> List[Achievement]:
        """
        Unlock activity and point-milestone achievements.

        Milestones compare against total_points as it stands when the
        evaluation starts, before any bonus granted in this pass.
        """
        owned = AchievementService.owned_types(student_id)
        candidates = activity_achievements(activity_type, metadata)

        streak = LearningStreak.query.filter_by(student_id=student_id).first()
        if streak is not None:
            candidates += milestone_achievements(streak.total_points or 0)

        return AchievementService._award_all(student_id, candidates, owned)

    @staticmethod
    def check_streak_achievements(student_id: int, current_streak: int) -> List[Achievement]:
        owned = AchievementService.owned_types(student_id)
        return AchievementService._award_all(student_id, streak_achievements(current_streak), owned)

    @staticmethod
    def _award_all(student_id: int, candidates, owned: set) -> List[Achievement]:
        unlocked = []
        for achievement_type in candidates:
            if achievement_type in owned:
                continue
            achievement = AchievementService._award(student_id, achievement_type)
            if achievement is not None:
                owned.add(achievement_type)
                unlocked.append(achievement)
        return unlocked

    @staticmethod
    def _award(student_id: int, achievement_type: str):
        """Insert the achievement row, its bonus transaction and the total update."""
        from .streak_service import StreakService

        definition = ACHIEVEMENT_DEFINITIONS.get(achievement_type)
        if definition is None:
            return None

        try:
            with db.session.begin_nested():
                achievement = Achievement(
                    student_id=student_id,
                    achievement_type=achievement_type,
                    title=definition.title,
                    description=definition.description,
                    icon=definition.icon,
                    points_earned=definition.points,
                    earned_at=utcnow(),
                )
                db.session.add(achievement)
                db.session.flush()
        except IntegrityError:
            # Đã có thành tích này (ghi bởi tiến trình khác)
            current_app.logger.info(f"Achievement {achievement_type} already owned by student {student_id}")
            return None

        TransactionLog.append(
            student_id=student_id,
            activity_type=ActivityType.EARN_ACHIEVEMENT,
            points_change=definition.points,
            description=f"Achievement unlocked: {definition.title}",
            reference_kind='achievement',
            metadata={'achievement_type': achievement_type},
        )
        StreakService.add_bonus_points(student_id, definition.points)

        current_app.logger.info(f"🏆 Achievement unlocked for student {student_id}: {definition.title}")
        return achievement

    @staticmethod
    def get_student_achievements(student_id: int) -> List[Achievement]:
        return Achievement.query.filter_by(student_id=student_id)\
            .order_by(Achievement.earned_at.desc(), Achievement.id.desc()).all()

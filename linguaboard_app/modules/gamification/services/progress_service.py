"""
Progress Service
Logic truy vấn tiến độ học viên và bảng xếp hạng (chỉ đọc).
"""
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import func

from linguaboard_app.core.error_handlers import ValidationError
from linguaboard_app.extensions import db
from linguaboard_app.utils.time_utils import utcnow
from ..config import get_setting
from ..models import CompletedActivity, LearningStreak, PointTransaction
from .achievement_service import AchievementService
from .daily_activity_service import DailyActivityService
from .streak_service import StreakService
from .transaction_log import TransactionLog

# Rolling windows for period leaderboards; all_time reads the running totals
LEADERBOARD_WINDOWS = {
    'day': timedelta(days=1),
    'week': timedelta(weeks=1),
    'month': timedelta(days=30),
}
LEADERBOARD_TIMEFRAMES = ('all_time',) + tuple(LEADERBOARD_WINDOWS)

_KIND_STATS = (
    ('quiz', 'quizzes_completed'),
    ('lesson', 'lessons_completed'),
    ('vocabulary', 'vocabulary_completed'),
    ('game', 'games_completed'),
)


def completion_stats(records) -> dict:
    """Tổng hợp số lần hoàn thành theo loại và điểm trung bình."""
    stats = {'total_completions': len(records)}
    for kind, key in _KIND_STATS:
        stats[key] = sum(1 for r in records if r.activity_kind == kind)

    scores = [r.best_score for r in records if r.best_score is not None]
    stats['average_score'] = sum(scores) / len(scores) if scores else 0
    return stats


class ProgressService:

    @staticmethod
    def get_student_progress(student_id: int, today: Optional[date] = None) -> dict:
        streak = StreakService.get_student_streak(student_id)
        completed = CompletedActivity.query.filter_by(student_id=student_id)\
            .order_by(CompletedActivity.first_completed_at.desc(), CompletedActivity.id.desc()).all()

        recent_transactions = TransactionLog.recent(
            student_id, limit=int(get_setting('RECENT_TRANSACTIONS_LIMIT'))
        )
        recent_activity = DailyActivityService.recent(
            student_id, days=int(get_setting('RECENT_ACTIVITY_DAYS')), today=today
        )

        return {
            'streak': streak.to_dict() if streak else None,
            'achievements': [a.to_dict() for a in AchievementService.get_student_achievements(student_id)],
            'recent_transactions': [t.to_dict() for t in recent_transactions],
            'recent_daily_activity': [d.to_dict() for d in recent_activity],
            'completed_activities': [c.to_dict() for c in completed],
            'completion_stats': completion_stats(completed),
        }

    @staticmethod
    def get_leaderboard(limit: int = 10, timeframe: str = 'all_time') -> list:
        """
        Lấy bảng xếp hạng top học viên.
        timeframe: 'day', 'week', 'month', 'all_time'
        """
        if limit < 1:
            raise ValidationError('Leaderboard limit must be at least 1', {'limit': limit})

        if timeframe not in LEADERBOARD_WINDOWS:
            rows = LearningStreak.query.order_by(
                LearningStreak.total_points.desc(), LearningStreak.student_id.asc()
            ).limit(limit).all()
            return [
                {
                    'student_id': r.student_id,
                    'total_points': r.total_points or 0,
                    'current_streak': r.current_streak or 0,
                    'longest_streak': r.longest_streak or 0,
                } for r in rows
            ]

        start = utcnow() - LEADERBOARD_WINDOWS[timeframe]
        period_points = func.sum(PointTransaction.points_change)
        results = db.session.query(
            PointTransaction.student_id,
            period_points.label('period_points'),
            LearningStreak.current_streak,
            LearningStreak.longest_streak,
        ).outerjoin(LearningStreak, LearningStreak.student_id == PointTransaction.student_id)\
            .filter(PointTransaction.created_at >= start)\
            .group_by(PointTransaction.student_id, LearningStreak.current_streak, LearningStreak.longest_streak)\
            .order_by(period_points.desc(), PointTransaction.student_id.asc())\
            .limit(limit).all()

        return [
            {
                'student_id': r.student_id,
                'total_points': int(r.period_points or 0),
                'current_streak': r.current_streak or 0,
                'longest_streak': r.longest_streak or 0,
            } for r in results
        ]

"""
Daily Activity Service
Tổng hợp hoạt động theo ngày: điểm, số quiz/bài học/từ vựng/trò chơi,
số phút học và các ngôn ngữ đã luyện tập.
"""
from datetime import date, timedelta
from typing import List, Optional

from linguaboard_app.extensions import db
from linguaboard_app.utils.time_utils import local_today
from ..logics.daily_logic import counter_for, merge_languages
from ..models import DailyActivitySummary


class DailyActivityService:

    @staticmethod
    def touch(
        student_id: int,
        activity_type: str,
        points_earned: int,
        language: Optional[str] = None,
        minutes: int = 0,
        today: Optional[date] = None
    ) -> DailyActivitySummary:
        """Create or update today's summary row for the student."""
        today = today or local_today()
        counter = counter_for(activity_type)

        summary = DailyActivitySummary.query.filter_by(
            student_id=student_id, activity_date=today
        ).first()

        if summary is None:
            summary = DailyActivitySummary(
                student_id=student_id,
                activity_date=today,
                points_earned=0,
                lessons_completed=0,
                quizzes_completed=0,
                vocabulary_practiced=0,
                games_played=0,
                minutes_spent=0,
                languages_practiced=[],
            )
            db.session.add(summary)

        summary.points_earned = (summary.points_earned or 0) + points_earned
        if counter:
            setattr(summary, counter, (getattr(summary, counter) or 0) + 1)
        if minutes:
            summary.minutes_spent = (summary.minutes_spent or 0) + minutes
        # New list object so the JSON column is marked dirty
        summary.languages_practiced = merge_languages(summary.languages_practiced, language)
        return summary

    @staticmethod
    def recent(student_id: int, days: int = 7, today: Optional[date] = None) -> List[DailyActivitySummary]:
        """Rows from ``today - days`` onwards, newest first."""
        since = (today or local_today()) - timedelta(days=days)
        return DailyActivitySummary.query.filter(
            DailyActivitySummary.student_id == student_id,
            DailyActivitySummary.activity_date >= since
        ).order_by(DailyActivitySummary.activity_date.desc()).all()

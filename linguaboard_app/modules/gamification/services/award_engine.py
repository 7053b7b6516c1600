"""
Award Engine
============
Turns one completed activity into point awards. The whole flow (idempotency
probe, point transaction, streak bump, daily summary, achievements, ledger
write-back) is a single unit of work committed once, under the student's
lock. Signals are sent only after the commit succeeded.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from linguaboard_app.core.error_handlers import AwardConflictError
from linguaboard_app.core.signals import achievement_unlocked, points_awarded
from linguaboard_app.extensions import db
from linguaboard_app.utils.db_session import commit_with_retry
from linguaboard_app.utils.time_utils import local_today
from ..config import get_setting
from ..logics.points_rules import (
    ActivityType,
    calculate_points,
    format_score,
    improvement_bonus,
    json_safe,
    parse_minutes,
    parse_score,
)
from ..models import CompletedActivity
from .achievement_service import AchievementService
from .completion_ledger import CompletionLedger
from .daily_activity_service import DailyActivityService
from .streak_service import StreakService
from .student_locks import student_locks
from .transaction_log import TransactionLog


@dataclass
class AwardOutcome:
    points: int
    outcome: str  # awarded | improvement | already_completed
    unlocked: List[Dict[str, Any]] = field(default_factory=list)


def _snapshot(achievements) -> List[Dict[str, Any]]:
    return [
        {'achievement_type': a.achievement_type, 'title': a.title, 'points': a.points_earned}
        for a in achievements
    ]


def _has_reference(reference_id, reference_kind) -> bool:
    return reference_id not in (None, '') and bool(reference_kind)


class AwardEngine:
    """Orchestrates point awards for completed activities."""

    @staticmethod
    def award_points(
        student_id: int,
        activity_type: str,
        reference_id=None,
        reference_kind: Optional[str] = None,
        language: Optional[str] = None,
        metadata: Any = None,
        today: Optional[date] = None
    ) -> int:
        """
        Award points for an activity and return how many were awarded.

        Returns 0 when the reference was already completed and the retake
        did not improve the best score.

        Raises:
            AwardConflictError: unique-constraint conflicts persisted through
                every retry.
        """
        metadata = json_safe(metadata)
        today = today or local_today()
        retries = int(current_app.config.get('AWARD_MAX_RETRIES', 3))

        def unit():
            return AwardEngine._award_unit(
                student_id, activity_type, reference_id, reference_kind, language, metadata, today
            )

        with student_locks.lock_for(student_id):
            try:
                result = commit_with_retry(db.session, unit, retries=retries, retry_on=(IntegrityError,))
            except IntegrityError as e:
                current_app.logger.error(
                    f"Award for student {student_id} ({activity_type}, {reference_kind}:{reference_id}) "
                    f"kept conflicting after {retries} attempts: {e}"
                )
                raise AwardConflictError(attempts=retries) from e

        AwardEngine._emit(student_id, activity_type, reference_id, reference_kind, result)
        return result.points

    @staticmethod
    def _award_unit(student_id, activity_type, reference_id, reference_kind, language, metadata, today) -> AwardOutcome:
        # Row lock first so concurrent workers on other processes queue up here
        StreakService.lock_streak_row(student_id)

        if _has_reference(reference_id, reference_kind):
            check = CompletionLedger.check_completion(student_id, reference_kind, reference_id)
            if check.completed:
                return AwardEngine._award_repeat(
                    student_id, activity_type, reference_id, reference_kind,
                    language, metadata, today, check.record
                )

        return AwardEngine._award_first(
            student_id, activity_type, reference_id, reference_kind, language, metadata, today
        )

    @staticmethod
    def _award_first(student_id, activity_type, reference_id, reference_kind, language, metadata, today) -> AwardOutcome:
        result = calculate_points(activity_type, metadata, get_setting)

        TransactionLog.append(
            student_id=student_id,
            activity_type=activity_type,
            points_change=result.total_points,
            description=result.description,
            reference_kind=reference_kind,
            reference_id=reference_id,
            language=language,
            metadata=metadata,
        )
        bump = StreakService.bump(student_id, result.total_points, today)
        DailyActivityService.touch(
            student_id, activity_type, result.total_points,
            language=language, minutes=parse_minutes(metadata), today=today
        )
        if _has_reference(reference_id, reference_kind):
            CompletionLedger.record_completion(
                student_id, reference_kind, reference_id, result.total_points, metadata
            )

        unlocked = bump.unlocked + AchievementService.run_isolated(
            student_id,
            lambda: AchievementService.check_achievements(student_id, activity_type, metadata)
        )

        current_app.logger.info(
            f"Awarded {result.total_points} points to student {student_id} for {activity_type} "
            f"({reference_kind}:{reference_id}) {result.breakdown}"
        )
        return AwardOutcome(result.total_points, 'awarded', _snapshot(unlocked))

    @staticmethod
    def _award_repeat(
        student_id, activity_type, reference_id, reference_kind,
        language, metadata, today, record: CompletedActivity
    ) -> AwardOutcome:
        new_score = parse_score(metadata)
        best_score = record.best_score if record.best_score is not None else 0

        if activity_type == ActivityType.COMPLETE_QUIZ and new_score is not None and new_score > best_score:
            bonus = improvement_bonus(activity_type, get_setting)
            if bonus > 0:
                TransactionLog.append(
                    student_id=student_id,
                    activity_type=ActivityType.IMPROVEMENT_BONUS,
                    points_change=bonus,
                    description=f"Score improvement: {format_score(record.best_score)}% → {format_score(new_score)}%",
                    reference_kind=reference_kind,
                    reference_id=reference_id,
                    language=language,
                    metadata=metadata,
                )
                bump = StreakService.bump(student_id, bonus, today)
                DailyActivityService.touch(
                    student_id, ActivityType.IMPROVEMENT_BONUS, bonus,
                    language=language, minutes=parse_minutes(metadata), today=today
                )
                CompletionLedger.record_completion(
                    student_id, reference_kind, reference_id, bonus, metadata, existing_record=record
                )
                current_app.logger.info(
                    f"Improvement bonus {bonus} for student {student_id} on {reference_kind}:{reference_id} "
                    f"({format_score(record.best_score)}% -> {format_score(new_score)}%)"
                )
                return AwardOutcome(bonus, 'improvement', _snapshot(bump.unlocked))

        CompletionLedger.record_completion(
            student_id, reference_kind, reference_id, 0, metadata, existing_record=record
        )
        current_app.logger.debug(
            f"Student {student_id} already completed {reference_kind}:{reference_id}, no points awarded"
        )
        return AwardOutcome(0, 'already_completed')

    @staticmethod
    def _emit(student_id, activity_type, reference_id, reference_kind, result: AwardOutcome) -> None:
        points_awarded.send(
            None,
            student_id=student_id,
            activity_type=activity_type,
            points=result.points,
            reference_id=reference_id,
            reference_type=reference_kind,
            outcome=result.outcome,
        )
        for unlocked in result.unlocked:
            achievement_unlocked.send(None, student_id=student_id, **unlocked)

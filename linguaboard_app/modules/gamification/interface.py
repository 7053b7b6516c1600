"""Public API of the gamification module for other modules."""
from typing import Any, Dict, List, Optional

from .services.award_engine import AwardEngine
from .services.progress_service import ProgressService
from .services.reconciliation_service import ReconciliationService


def award_points(
    student_id: int,
    activity_type: str,
    reference_id=None,
    reference_kind: Optional[str] = None,
    language: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> int:
    """Award points for a completed activity; returns the points actually awarded."""
    return AwardEngine.award_points(
        student_id,
        activity_type,
        reference_id=reference_id,
        reference_kind=reference_kind,
        language=language,
        metadata=metadata
    )


def get_student_progress(student_id: int) -> Dict[str, Any]:
    """
    Get gamification progress for a student.

    Returns:
        dict with: streak, achievements, recent_transactions,
        recent_daily_activity, completed_activities, completion_stats
    """
    return ProgressService.get_student_progress(student_id)


def get_leaderboard(limit: int = 10, timeframe: str = 'all_time') -> List[Dict[str, Any]]:
    return ProgressService.get_leaderboard(limit=limit, timeframe=timeframe)


def reconcile_student(student_id: int) -> Dict[str, Any]:
    return ReconciliationService.reconcile_student(student_id)


def reconcile_all_students() -> Dict[str, Any]:
    return ReconciliationService.reconcile_all_students()

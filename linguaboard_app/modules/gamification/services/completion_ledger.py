"""
Completion Ledger
=================
Records which (student, activity kind, reference) triples have been completed,
how often, and the best/latest score. Acts as the idempotency gate of the
award engine.
"""
from dataclasses import dataclass
from typing import Any, Optional

from linguaboard_app.extensions import db
from linguaboard_app.utils.time_utils import utcnow
from ..logics.points_rules import parse_score
from ..models import CompletedActivity


@dataclass
class CompletionCheck:
    completed: bool
    record: Optional[CompletedActivity] = None


class CompletionLedger:
    """Service for the per-reference completion records."""

    @staticmethod
    def check_completion(student_id: int, activity_kind: str, reference_id) -> CompletionCheck:
        """Read-only probe: has this student already completed the reference?"""
        record = CompletedActivity.query.filter_by(
            student_id=student_id,
            activity_kind=activity_kind,
            reference_id=str(reference_id),
        ).first()
        return CompletionCheck(completed=record is not None, record=record)

    @staticmethod
    def record_completion(
        student_id: int,
        activity_kind: str,
        reference_id,
        points_awarded: int,
        metadata: Any = None,
        existing_record: Optional[CompletedActivity] = None
    ) -> CompletedActivity:
        """
        Insert the first completion or update an existing one.

        A score in ``metadata`` updates latest_score and raises best_score;
        without a score both are left alone. Points accumulate.
        """
        score = parse_score(metadata)
        now = utcnow()

        if existing_record is None:
            record = CompletedActivity(
                student_id=student_id,
                activity_kind=activity_kind,
                reference_id=str(reference_id),
                completion_count=1,
                best_score=score,
                latest_score=score,
                points_awarded=points_awarded,
                extra_data=metadata,
                first_completed_at=now,
                last_completed_at=now,
            )
            db.session.add(record)
            return record

        record = existing_record
        record.completion_count = (record.completion_count or 0) + 1
        if score is not None:
            record.latest_score = score
            record.best_score = score if record.best_score is None else max(record.best_score, score)
        record.points_awarded = (record.points_awarded or 0) + points_awarded
        if metadata is not None:
            record.extra_data = metadata
        record.last_completed_at = now
        return record

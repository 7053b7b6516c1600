"""
Point Transaction Log
Nhật ký điểm chỉ ghi thêm; tổng các giao dịch là nguồn sự thật cho điểm.
"""
from typing import Any, Optional

from sqlalchemy import func

from linguaboard_app.extensions import db
from linguaboard_app.utils.time_utils import utcnow
from ..models import PointTransaction


class TransactionLog:
    """Append-only access to point transactions."""

    @staticmethod
    def append(
        student_id: int,
        activity_type: str,
        points_change: int,
        description: str,
        reference_kind: Optional[str] = None,
        reference_id=None,
        language: Optional[str] = None,
        metadata: Any = None
    ) -> PointTransaction:
        entry = PointTransaction(
            student_id=student_id,
            activity_type=activity_type,
            points_change=int(points_change),
            description=description,
            reference_kind=reference_kind,
            reference_id=str(reference_id) if reference_id is not None else None,
            language=language,
            extra_data=metadata,
            created_at=utcnow(),
        )
        db.session.add(entry)
        return entry

    @staticmethod
    def sum_for_student(student_id: int) -> int:
        """Tổng điểm từ nhật ký giao dịch."""
        total = db.session.query(func.sum(PointTransaction.points_change))\
            .filter(PointTransaction.student_id == student_id).scalar()
        return int(total or 0)

    @staticmethod
    def recent(student_id: int, limit: int = 10):
        return PointTransaction.query.filter_by(student_id=student_id)\
            .order_by(PointTransaction.created_at.desc(), PointTransaction.id.desc())\
            .limit(limit).all()

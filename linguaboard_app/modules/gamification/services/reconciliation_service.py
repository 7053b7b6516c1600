"""
Reconciliation Service
Đồng bộ LearningStreak.total_points với tổng nhật ký giao dịch điểm.
"""
from flask import current_app

from linguaboard_app.extensions import db
from linguaboard_app.utils.db_session import commit_with_retry
from ..models import LearningStreak, PointTransaction
from .student_locks import student_locks
from .streak_service import StreakService
from .transaction_log import TransactionLog


class ReconciliationService:

    @staticmethod
    def reconcile_student(student_id: int, repair: bool = True) -> dict:
        """
        Recompute one student's total from the transaction log.

        Returns:
            dict with stored_total, ledger_total, drift and whether it was repaired.
        """
        def unit():
            streak = StreakService.lock_streak_row(student_id)
            ledger_total = TransactionLog.sum_for_student(student_id)
            stored_total = streak.total_points if streak else None
            drift = ledger_total - (stored_total or 0)

            repaired = False
            if repair and drift:
                streak = streak or StreakService.get_or_create_streak(student_id)
                streak.total_points = ledger_total
                repaired = True

            return {
                'student_id': student_id,
                'stored_total': stored_total,
                'ledger_total': ledger_total,
                'drift': drift,
                'repaired': repaired,
            }

        with student_locks.lock_for(student_id):
            report = commit_with_retry(db.session, unit)

        if report['drift']:
            current_app.logger.warning(
                f"Point drift for student {student_id}: stored={report['stored_total']} "
                f"ledger={report['ledger_total']} repaired={report['repaired']}"
            )
        return report

    @staticmethod
    def reconcile_all_students(repair: bool = True) -> dict:
        """Đồng bộ điểm cho tất cả học viên có streak hoặc giao dịch."""
        streak_ids = {row.student_id for row in db.session.query(LearningStreak.student_id).all()}
        ledger_ids = {row.student_id for row in db.session.query(PointTransaction.student_id).distinct().all()}

        student_ids = sorted(streak_ids | ledger_ids)
        mismatches = []
        for student_id in student_ids:
            report = ReconciliationService.reconcile_student(student_id, repair=repair)
            if report['drift']:
                mismatches.append(report)

        current_app.logger.info(
            f"Reconciled {len(student_ids)} students, {len(mismatches)} with drift"
        )
        return {
            'checked': len(student_ids),
            'mismatched': len(mismatches),
            'mismatches': mismatches,
        }

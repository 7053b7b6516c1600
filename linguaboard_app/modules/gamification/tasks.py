"""Scheduled jobs for the gamification module."""
from linguaboard_app.extensions import scheduler


def reconcile_point_totals():
    """Nightly job: resync every student's total_points with the transaction log."""
    from .services.reconciliation_service import ReconciliationService

    with scheduler.app.app_context():
        report = ReconciliationService.reconcile_all_students()
        scheduler.app.logger.info(
            f"[Scheduler] Point reconciliation done: {report['checked']} checked, "
            f"{report['mismatched']} repaired"
        )
        return report

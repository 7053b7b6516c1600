"""
Tests for point reconciliation and the nightly job
"""

from datetime import date

from linguaboard_app import db
from linguaboard_app.extensions import scheduler
from linguaboard_app.modules.gamification import interface
from linguaboard_app.modules.gamification.models import LearningStreak
from linguaboard_app.modules.gamification.services.award_engine import AwardEngine
from linguaboard_app.modules.gamification.services.reconciliation_service import ReconciliationService
from linguaboard_app.modules.gamification.tasks import reconcile_point_totals

TODAY = date(2024, 3, 10)


def seed(student_id, reference_id='Q1', score=100):
    AwardEngine.award_points(
        student_id, 'COMPLETE_QUIZ', reference_id=reference_id, reference_kind='quiz',
        metadata={'score': score}, today=TODAY
    )


def corrupt_total(student_id, value):
    streak = LearningStreak.query.filter_by(student_id=student_id).one()
    streak.total_points = value
    db.session.commit()


class TestReconcileStudent:

    def test_consistent_after_awards(self, app):
        seed(1)
        seed(1, 'Q2', 60)
        seed(1, 'Q2', 90)

        report = interface.reconcile_student(1)

        assert report['drift'] == 0
        assert report['repaired'] is False
        assert report['ledger_total'] == report['stored_total']

    def test_repairs_drift(self, app):
        seed(1)
        corrupt_total(1, 999)

        report = ReconciliationService.reconcile_student(1)

        assert report['stored_total'] == 999
        assert report['ledger_total'] == 105
        assert report['drift'] == 105 - 999
        assert report['repaired'] is True
        assert LearningStreak.query.one().total_points == 105

    def test_report_only(self, app):
        seed(1)
        corrupt_total(1, 10)

        report = ReconciliationService.reconcile_student(1, repair=False)

        assert report['drift'] == 95
        assert report['repaired'] is False
        assert LearningStreak.query.one().total_points == 10

    def test_unknown_student(self, app):
        report = ReconciliationService.reconcile_student(404)

        assert report['stored_total'] is None
        assert report['drift'] == 0


class TestReconcileAll:

    def test_lists_only_mismatches(self, app):
        seed(1)
        seed(2)
        seed(3)
        corrupt_total(2, 0)

        report = interface.reconcile_all_students()

        assert report['checked'] == 3
        assert report['mismatched'] == 1
        assert report['mismatches'][0]['student_id'] == 2
        assert LearningStreak.query.filter_by(student_id=2).one().total_points == 105

    def test_scheduled_job(self, app, monkeypatch):
        monkeypatch.setattr(scheduler, 'app', app, raising=False)
        seed(1)
        corrupt_total(1, 1)

        report = reconcile_point_totals()

        assert report['mismatched'] == 1
        assert LearningStreak.query.one().total_points == 105

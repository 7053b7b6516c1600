from flask import jsonify, request
from marshmallow import ValidationError as SchemaValidationError

from linguaboard_app.core.error_handlers import ValidationError, success_response
from . import gamification_api_bp
from .schemas import AwardRequestSchema, LeaderboardQuerySchema, ReconcileRequestSchema
from .services.award_engine import AwardEngine
from .services.progress_service import ProgressService
from .services.reconciliation_service import ReconciliationService


def _load(schema, data):
    try:
        return schema.load(data or {})
    except SchemaValidationError as err:
        raise ValidationError('Invalid request', err.messages) from err


@gamification_api_bp.route('/award', methods=['POST'])
def award_points_api():
    """API cộng điểm cho một hoạt động đã hoàn thành."""
    data = _load(AwardRequestSchema(), request.get_json(silent=True))

    points = AwardEngine.award_points(
        data['student_id'],
        data['activity_type'],
        reference_id=data['reference_id'],
        reference_kind=data['reference_type'],
        language=data['language'],
        metadata=data['payload']
    )

    message = f'Awarded {points} points' if points else 'Activity already completed, no points awarded'
    return jsonify({
        'success': True,
        'points_awarded': points,
        'message': message
    })


@gamification_api_bp.route('/progress/<int:student_id>', methods=['GET'])
def get_progress_api(student_id):
    """API lấy tiến độ của học viên."""
    return jsonify(success_response(ProgressService.get_student_progress(student_id)))


@gamification_api_bp.route('/leaderboard', methods=['GET'])
def get_leaderboard_api():
    """API lấy dữ liệu bảng xếp hạng."""
    query = _load(LeaderboardQuerySchema(), request.args)

    return jsonify({
        'success': True,
        'leaderboard': ProgressService.get_leaderboard(limit=query['limit'], timeframe=query['timeframe']),
        'timeframe': query['timeframe']
    })


@gamification_api_bp.route('/reconcile', methods=['POST'])
def reconcile_api():
    """API đồng bộ tổng điểm với nhật ký giao dịch."""
    data = _load(ReconcileRequestSchema(), request.get_json(silent=True))

    if data['student_id'] is not None:
        report = ReconciliationService.reconcile_student(data['student_id'])
    else:
        report = ReconciliationService.reconcile_all_students()

    return jsonify(success_response(report))

from marshmallow import EXCLUDE, Schema, fields, validate

from .services.progress_service import LEADERBOARD_TIMEFRAMES

MAX_LEADERBOARD_LIMIT = 100


class AwardRequestSchema(Schema):
    """Payload of POST /api/gamification/award."""

    class Meta:
        unknown = EXCLUDE

    student_id = fields.Int(required=True)
    activity_type = fields.Str(required=True, validate=validate.Length(min=1))
    reference_id = fields.Raw(load_default=None, allow_none=True)
    reference_type = fields.Str(load_default=None, allow_none=True)
    language = fields.Str(load_default=None, allow_none=True)
    # Malformed metadata is tolerated downstream, so accept anything here
    payload = fields.Raw(data_key='metadata', load_default=None, allow_none=True)


class LeaderboardQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    limit = fields.Int(load_default=10, validate=validate.Range(min=1, max=MAX_LEADERBOARD_LIMIT))
    timeframe = fields.Str(load_default='all_time', validate=validate.OneOf(LEADERBOARD_TIMEFRAMES))


class ReconcileRequestSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    student_id = fields.Int(load_default=None, allow_none=True)

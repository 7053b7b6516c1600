from linguaboard_app.db_instance import db
from linguaboard_app.utils.time_utils import utcnow


def _iso(value):
    return value.isoformat() if value else None


class CompletedActivity(db.Model):
    """Mô hình lần hoàn thành một hoạt động (quiz, lesson, ...) của học viên."""
    __tablename__ = 'completed_activities'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, nullable=False, index=True)
    activity_kind = db.Column(db.String(50), nullable=False)  # quiz, lesson, vocabulary, game
    reference_id = db.Column(db.String(100), nullable=False)

    completion_count = db.Column(db.Integer, nullable=False, default=1)
    best_score = db.Column(db.Float)  # percentage, NULL when never scored
    latest_score = db.Column(db.Float)
    points_awarded = db.Column(db.Integer, nullable=False, default=0)
    # "metadata" is reserved on declarative classes
    extra_data = db.Column('metadata', db.JSON)

    first_completed_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    last_completed_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        db.UniqueConstraint('student_id', 'activity_kind', 'reference_id', name='_student_activity_ref_uc'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'student_id': self.student_id,
            'activity_kind': self.activity_kind,
            'reference_id': self.reference_id,
            'completion_count': self.completion_count,
            'best_score': self.best_score,
            'latest_score': self.latest_score,
            'points_awarded': self.points_awarded,
            'metadata': self.extra_data,
            'first_completed_at': _iso(self.first_completed_at),
            'last_completed_at': _iso(self.last_completed_at),
        }

    def __repr__(self):
        return f'<CompletedActivity {self.student_id}:{self.activity_kind}:{self.reference_id} x{self.completion_count}>'


class PointTransaction(db.Model):
    """Nhật ký cộng/trừ điểm. Chỉ thêm mới, không sửa."""
    __tablename__ = 'point_transactions'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, nullable=False, index=True)
    activity_type = db.Column(db.String(50), nullable=False)  # COMPLETE_QUIZ, IMPROVEMENT_BONUS, EARN_ACHIEVEMENT...
    points_change = db.Column(db.Integer, nullable=False)
    description = db.Column(db.String(255))
    reference_kind = db.Column(db.String(50))
    reference_id = db.Column(db.String(100))
    language = db.Column(db.String(20))
    extra_data = db.Column('metadata', db.JSON)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'student_id': self.student_id,
            'activity_type': self.activity_type,
            'points_change': self.points_change,
            'description': self.description,
            'reference_kind': self.reference_kind,
            'reference_id': self.reference_id,
            'language': self.language,
            'metadata': self.extra_data,
            'created_at': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<PointTransaction {self.student_id} {self.activity_type} {self.points_change:+d}>'


class LearningStreak(db.Model):
    """Chuỗi ngày học liên tục và tổng điểm của học viên (1 dòng / học viên)."""
    __tablename__ = 'learning_streaks'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, nullable=False, unique=True)
    current_streak = db.Column(db.Integer, nullable=False, default=0)
    longest_streak = db.Column(db.Integer, nullable=False, default=0)
    last_activity_date = db.Column(db.Date)
    total_points = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'student_id': self.student_id,
            'current_streak': self.current_streak,
            'longest_streak': self.longest_streak,
            'last_activity_date': _iso(self.last_activity_date),
            'total_points': self.total_points,
            'updated_at': _iso(self.updated_at),
        }

    def __repr__(self):
        return f'<LearningStreak {self.student_id} {self.current_streak}/{self.longest_streak}>'


class Achievement(db.Model):
    """Thành tích đã mở khóa (mỗi loại chỉ một lần cho mỗi học viên)."""
    __tablename__ = 'achievements'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, nullable=False, index=True)
    achievement_type = db.Column(db.String(50), nullable=False)
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(255))
    icon = db.Column(db.String(20))
    points_earned = db.Column(db.Integer, nullable=False, default=0)
    earned_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    __table_args__ = (db.UniqueConstraint('student_id', 'achievement_type', name='_student_achievement_uc'),)

    def to_dict(self):
        return {
            'id': self.id,
            'achievement_type': self.achievement_type,
            'title': self.title,
            'description': self.description,
            'icon': self.icon,
            'points_earned': self.points_earned,
            'earned_at': _iso(self.earned_at),
        }

    def __repr__(self):
        return f'<Achievement {self.student_id} {self.achievement_type}>'


class DailyActivitySummary(db.Model):
    """Thống kê hoạt động theo ngày của học viên."""
    __tablename__ = 'daily_activity'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, nullable=False, index=True)
    activity_date = db.Column(db.Date, nullable=False)
    points_earned = db.Column(db.Integer, nullable=False, default=0)
    lessons_completed = db.Column(db.Integer, nullable=False, default=0)
    quizzes_completed = db.Column(db.Integer, nullable=False, default=0)
    vocabulary_practiced = db.Column(db.Integer, nullable=False, default=0)
    games_played = db.Column(db.Integer, nullable=False, default=0)
    minutes_spent = db.Column(db.Integer, nullable=False, default=0)
    languages_practiced = db.Column(db.JSON, default=list)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (db.UniqueConstraint('student_id', 'activity_date', name='_student_activity_date_uc'),)

    def to_dict(self):
        return {
            'activity_date': _iso(self.activity_date),
            'points_earned': self.points_earned,
            'lessons_completed': self.lessons_completed,
            'quizzes_completed': self.quizzes_completed,
            'vocabulary_practiced': self.vocabulary_practiced,
            'games_played': self.games_played,
            'minutes_spent': self.minutes_spent,
            'languages_practiced': list(self.languages_practiced or []),
        }

    def __repr__(self):
        return f'<DailyActivitySummary {self.student_id} {self.activity_date}>'

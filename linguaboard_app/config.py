# File: linguaboard_app/config.py

import os
from dotenv import load_dotenv

load_dotenv()

# Thư mục gốc của dự án: file này nằm ở linguaboard_app/ nên đi lên 1 cấp
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

# Đường dẫn đến file database SQLite mặc định
DATABASE_PATH = os.path.join(BASE_DIR, "database", "linguaboard.db")


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Cấu hình ứng dụng Linguaboard."""

    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        # Fallback for development, though env is preferred
        SECRET_KEY = 'dev-secret-key-replace-in-production'

    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Day boundary for streaks and daily summaries. Unset means the server's local date.
    SYSTEM_TIMEZONE = os.environ.get('SYSTEM_TIMEZONE')

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(BASE_DIR, 'logs')
    LOG_TO_FILE = _env_bool('LOG_TO_FILE', True)
    LOG_JSON = _env_bool('LOG_JSON', False)

    # Number of attempts for one award when a unique-constraint conflict is detected
    AWARD_MAX_RETRIES = int(os.environ.get('AWARD_MAX_RETRIES', 3))

    # Scheduler (nightly reconciliation of point totals)
    SCHEDULER_ENABLED = _env_bool('SCHEDULER_ENABLED', True)
    SCHEDULER_API_ENABLED = False
    RECONCILE_JOB_HOUR = int(os.environ.get('RECONCILE_JOB_HOUR', 3))

    @classmethod
    def init_app(cls, app):
        """Khởi tạo các thư mục cần thiết."""
        uri = app.config.get('SQLALCHEMY_DATABASE_URI', '')
        if uri == f'sqlite:///{DATABASE_PATH}':
            os.makedirs(os.path.dirname(DATABASE_PATH), exist_ok=True)
        if app.config.get('LOG_TO_FILE'):
            os.makedirs(app.config['LOG_DIR'], exist_ok=True)

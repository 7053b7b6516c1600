"""Runtime configuration lookups shared by the feature modules."""

from typing import Any

from flask import current_app, has_app_context


def get_runtime_config(key: str, default: Any = None) -> Any:
    """Lấy cấu hình ưu tiên từ current_app, fallback về mặc định."""

    if has_app_context():
        return current_app.config.get(key, default)
    return default

"""
Centralized Utilities for Time Handling in Linguaboard.
Goal: store timestamps in UTC, and derive calendar days (streaks, daily
summaries) from a single configurable day boundary.
"""
from datetime import date, datetime, timezone
from typing import Optional

import pytz
from flask import current_app, has_app_context


def utcnow() -> datetime:
    """
    Get the current timezone-aware UTC datetime.
    Always use this instead of datetime.utcnow() or datetime.now().
    """
    return datetime.now(timezone.utc)


def _system_timezone_name() -> Optional[str]:
    if has_app_context():
        return current_app.config.get('SYSTEM_TIMEZONE')
    return None


def local_today(now: Optional[datetime] = None) -> date:
    """
    Return today's calendar date at the configured day boundary.

    When SYSTEM_TIMEZONE is unset the server's local date is used.
    An unknown timezone name falls back to UTC.
    """
    tz_name = _system_timezone_name()
    if not tz_name:
        return (now.astimezone() if now else datetime.now()).date()

    try:
        tz = pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        current_app.logger.warning(f"Unknown SYSTEM_TIMEZONE '{tz_name}', falling back to UTC")
        tz = pytz.UTC

    now = now or utcnow()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(tz).date()

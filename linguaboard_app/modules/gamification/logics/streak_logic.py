"""
Streak Logic - Pure functions for streak calculation.

This module contains ONLY pure Python logic.
NO database, NO Flask, NO model dependencies allowed.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional


@dataclass(frozen=True)
class StreakState:
    """Streak counters after an activity on ``last_activity_date``."""
    current_streak: int
    longest_streak: int
    last_activity_date: date
    increased: bool = False


def start_streak(today: date) -> StreakState:
    """Trạng thái cho học viên chưa có chuỗi nào."""
    return StreakState(current_streak=1, longest_streak=1, last_activity_date=today, increased=True)


def next_streak_state(
    current_streak: Optional[int],
    longest_streak: Optional[int],
    last_activity_date: Optional[date],
    today: date
) -> StreakState:
    """
    Tính chuỗi mới khi học viên có hoạt động vào ngày ``today``.

    Args:
        current_streak: Chuỗi hiện tại đã lưu.
        longest_streak: Chuỗi dài nhất đã lưu.
        last_activity_date: Ngày hoạt động gần nhất (có thể None).
        today: Ngày hiện tại theo múi giờ hệ thống.

    Returns:
        StreakState; ``increased`` is True only when current_streak grew.

    Examples:
        >>> from datetime import date
        >>> next_streak_state(3, 5, date(2024, 1, 2), date(2024, 1, 3)).current_streak
        4
        >>> next_streak_state(3, 5, date(2024, 1, 1), date(2024, 1, 3)).current_streak
        1
    """
    current = current_streak or 0
    longest = longest_streak or 0

    if last_activity_date == today:
        # Same day: counters untouched
        return StreakState(current, longest, today, increased=False)

    if last_activity_date is not None and last_activity_date == today - timedelta(days=1):
        current += 1
        return StreakState(current, max(longest, current), today, increased=True)

    # Gap of two or more days, a future date or no date at all
    return StreakState(1, max(longest, 1), today, increased=current < 1)

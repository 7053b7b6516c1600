"""
Daily Logic - Pure helpers for the per-day activity summary.
"""
from typing import Iterable, List, Optional

# Checked in order, first substring match wins
FAMILY_COUNTERS = (
    ('QUIZ', 'quizzes_completed'),
    ('LESSON', 'lessons_completed'),
    ('VOCABULARY', 'vocabulary_practiced'),
    ('GAME', 'games_played'),
)


def counter_for(activity_type: Optional[str]) -> Optional[str]:
    """
    Tên cột đếm tương ứng với loại hoạt động, hoặc None.

    Examples:
        >>> counter_for('COMPLETE_QUIZ')
        'quizzes_completed'
        >>> counter_for('IMPROVEMENT_BONUS') is None
        True
    """
    label = (activity_type or '').upper()
    for token, column in FAMILY_COUNTERS:
        if token in label:
            return column
    return None


def merge_languages(existing: Optional[Iterable[str]], language: Optional[str]) -> List[str]:
    """Return a new list with ``language`` appended when not already present."""
    merged = list(existing or [])
    if language and language not in merged:
        merged.append(language)
    return merged

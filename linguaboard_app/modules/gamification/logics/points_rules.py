"""
Points Rules - Declarative point table for completed activities.

Pure logic: no database access. Every activity type maps to a base-point
setting plus a list of additive bonus rules, so a new activity or bonus is a
new table entry rather than another branch.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..config import GamificationDefaultConfig

SettingLookup = Callable[[str], Any]


def _default_lookup(key: str) -> Any:
    return getattr(GamificationDefaultConfig, key)


class ActivityType:
    """Activity tags used on point transactions."""
    COMPLETE_QUIZ = 'COMPLETE_QUIZ'
    COMPLETE_LESSON = 'COMPLETE_LESSON'
    COMPLETE_VOCABULARY = 'COMPLETE_VOCABULARY'
    COMPLETE_GAME = 'COMPLETE_GAME'
    # Pseudo-types produced by the engine itself
    IMPROVEMENT_BONUS = 'IMPROVEMENT_BONUS'
    EARN_ACHIEVEMENT = 'EARN_ACHIEVEMENT'


# ---------------------------------------------------------------------------
# Metadata parsing. Malformed values are treated as absent, never fatal.
# ---------------------------------------------------------------------------

_FALSE_STRINGS = {'', '0', 'false', 'no', 'off'}


def json_safe(metadata: Any) -> Any:
    """
    Return a copy of ``metadata`` that a JSON column can store.

    Values json cannot encode (Decimal, datetime, ...) become strings;
    a payload that still fails to encode is dropped as ``None``.
    """
    if metadata is None:
        return None
    try:
        return json.loads(json.dumps(metadata, default=str))
    except (TypeError, ValueError):
        return None


def _as_mapping(metadata: Any) -> Mapping[str, Any]:
    return metadata if isinstance(metadata, Mapping) else {}


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip().rstrip('%')) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_score(metadata: Any) -> Optional[float]:
    """Return the score percentage carried by ``metadata`` or ``None``."""
    return _as_number(_as_mapping(metadata).get('score'))


def has_time_bonus(metadata: Any) -> bool:
    data = _as_mapping(metadata)
    flag = data.get('timeBonus', data.get('time_bonus'))
    if isinstance(flag, str):
        return flag.strip().lower() not in _FALSE_STRINGS
    return bool(flag)


def parse_minutes(metadata: Any) -> int:
    """Minutes spent on the activity, 0 when missing or not a positive number."""
    data = _as_mapping(metadata)
    minutes = _as_number(data.get('minutes_spent', data.get('time_spent_minutes')))
    if minutes is None or minutes <= 0:
        return 0
    return int(round_half_up(minutes))


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BonusRule:
    """An additive bonus granted when ``applies(metadata, lookup)`` is true."""
    name: str
    points_key: str
    applies: Callable[[Any, SettingLookup], bool]
    description_suffix: str


@dataclass(frozen=True)
class ActivityRule:
    base_points_key: str
    bonuses: Tuple[BonusRule, ...] = ()


def _is_perfect_score(metadata: Any, lookup: SettingLookup) -> bool:
    score = parse_score(metadata)
    return score is not None and score >= lookup('PERFECT_SCORE_THRESHOLD')


def _is_quick_completion(metadata: Any, lookup: SettingLookup) -> bool:
    return has_time_bonus(metadata)


QUIZ_BONUSES = (
    BonusRule('perfect_score', 'QUIZ_PERFECT_SCORE_BONUS', _is_perfect_score, ' with perfect score!'),
    BonusRule('time_bonus', 'QUIZ_TIME_BONUS', _is_quick_completion, ' quickly'),
)

ACTIVITY_RULES: Dict[str, ActivityRule] = {
    ActivityType.COMPLETE_QUIZ: ActivityRule('COMPLETE_QUIZ_POINTS', QUIZ_BONUSES),
    ActivityType.COMPLETE_LESSON: ActivityRule('COMPLETE_LESSON_POINTS'),
    ActivityType.COMPLETE_VOCABULARY: ActivityRule('COMPLETE_VOCABULARY_POINTS'),
    ActivityType.COMPLETE_GAME: ActivityRule('COMPLETE_GAME_POINTS'),
}


@dataclass
class PointsResult:
    """Result of a point calculation."""
    base_points: int
    bonus_points: int
    total_points: int
    description: str
    breakdown: Dict[str, int] = field(default_factory=dict)


def describe_activity(activity_type: str) -> str:
    label = activity_type.lower()
    if label.startswith('complete_'):
        label = label[len('complete_'):]
    return f"Completed {label.replace('_', ' ')}"


def base_points_for(activity_type: str, lookup: SettingLookup = _default_lookup) -> int:
    """Base points for ``activity_type``; unknown types are worth 0."""
    rule = ACTIVITY_RULES.get(activity_type)
    if rule is None:
        return 0
    return int(lookup(rule.base_points_key) or 0)


def calculate_points(
    activity_type: str,
    metadata: Any = None,
    lookup: SettingLookup = _default_lookup
) -> PointsResult:
    """
    Points for a first-time completion: base plus every bonus that applies.

    Examples:
        >>> calculate_points('COMPLETE_QUIZ', {'score': 100}).total_points
        30
        >>> calculate_points('UNKNOWN').total_points
        0
    """
    base = base_points_for(activity_type, lookup)
    description = describe_activity(activity_type)
    breakdown = {'base': base}
    bonus_total = 0

    rule = ACTIVITY_RULES.get(activity_type)
    for bonus in (rule.bonuses if rule else ()):
        if bonus.applies(metadata, lookup):
            points = int(lookup(bonus.points_key) or 0)
            breakdown[bonus.name] = points
            bonus_total += points
            description += bonus.description_suffix

    return PointsResult(
        base_points=base,
        bonus_points=bonus_total,
        total_points=base + bonus_total,
        description=description,
        breakdown=breakdown,
    )


def improvement_bonus(activity_type: str, lookup: SettingLookup = _default_lookup) -> int:
    """Bonus for beating a previous best score: a share of the base points."""
    ratio = float(lookup('IMPROVEMENT_BONUS_RATIO'))
    return round_half_up(base_points_for(activity_type, lookup) * ratio)


def format_score(score: Optional[float]) -> str:
    if score is None:
        return '0'
    return str(int(score)) if float(score).is_integer() else f"{score:g}"

"""
Achievement Rules - Declarative achievement definitions and unlock conditions.

Pure logic: callers pass in the facts (activity, total points, streak length)
and receive the achievement types whose condition holds. Whether a student
already owns one is decided by the service layer.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple

from .points_rules import ActivityType, parse_score


@dataclass(frozen=True)
class AchievementDefinition:
    achievement_type: str
    title: str
    description: str
    icon: str
    points: int


_DEFINITIONS = (
    AchievementDefinition('first_quiz', 'First Steps', 'Completed your first quiz!', '🎯', 25),
    AchievementDefinition('quiz_perfectionist', 'Perfectionist', 'Scored 100% on a quiz!', '💯', 50),
    AchievementDefinition('lesson_completed', 'Lesson Learner', 'Completed your first lesson!', '📚', 25),
    AchievementDefinition('points_milestone_100', 'Point Collector', 'Earned 100 total points!', '⭐', 10),
    AchievementDefinition('points_milestone_500', 'Point Master', 'Earned 500 total points!', '🌟', 50),
    AchievementDefinition('points_milestone_1000', 'Point Legend', 'Earned 1000 total points!', '💫', 100),
    AchievementDefinition('streak_7_days', 'Week Warrior', '7 days learning streak!', '🔥', 100),
    AchievementDefinition('streak_30_days', 'Month Master', '30 days learning streak!', '🏆', 300),
    AchievementDefinition('streak_100_days', 'Century Scholar', '100 days learning streak!', '👑', 1000),
)

ACHIEVEMENT_DEFINITIONS: Dict[str, AchievementDefinition] = {d.achievement_type: d for d in _DEFINITIONS}


@dataclass(frozen=True)
class ActivityAchievementRule:
    achievement_type: str
    activity_type: str
    condition: Callable[[Any], bool] = lambda metadata: True


def _scored_perfect(metadata: Any) -> bool:
    score = parse_score(metadata)
    return score is not None and score >= 100


ACTIVITY_ACHIEVEMENT_RULES: Tuple[ActivityAchievementRule, ...] = (
    ActivityAchievementRule('first_quiz', ActivityType.COMPLETE_QUIZ),
    ActivityAchievementRule('quiz_perfectionist', ActivityType.COMPLETE_QUIZ, _scored_perfect),
    ActivityAchievementRule('lesson_completed', ActivityType.COMPLETE_LESSON),
)

# (threshold, achievement_type), ascending
POINT_MILESTONES: Tuple[Tuple[int, str], ...] = (
    (100, 'points_milestone_100'),
    (500, 'points_milestone_500'),
    (1000, 'points_milestone_1000'),
)

STREAK_MILESTONES: Tuple[Tuple[int, str], ...] = (
    (7, 'streak_7_days'),
    (30, 'streak_30_days'),
    (100, 'streak_100_days'),
)


def activity_achievements(activity_type: str, metadata: Any = None) -> List[str]:
    """Thành tích gắn với loại hoạt động vừa hoàn thành."""
    return [
        rule.achievement_type
        for rule in ACTIVITY_ACHIEVEMENT_RULES
        if rule.activity_type == activity_type and rule.condition(metadata)
    ]


def milestone_achievements(total_points: int) -> List[str]:
    return [kind for threshold, kind in POINT_MILESTONES if (total_points or 0) >= threshold]


def streak_achievements(current_streak: int) -> List[str]:
    return [kind for threshold, kind in STREAK_MILESTONES if (current_streak or 0) >= threshold]

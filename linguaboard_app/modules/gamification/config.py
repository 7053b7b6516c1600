# modules/gamification/config.py
from linguaboard_app.services.config_service import get_runtime_config


class GamificationDefaultConfig:
    """
    Default configuration for the gamification module.
    Any key can be overridden by an app config entry of the same name.
    """

    # --- Base points per activity ---
    COMPLETE_QUIZ_POINTS = 10
    COMPLETE_LESSON_POINTS = 15
    COMPLETE_VOCABULARY_POINTS = 5
    COMPLETE_GAME_POINTS = 8

    # --- Quiz bonuses ---
    QUIZ_PERFECT_SCORE_BONUS = 20  # score >= 100
    QUIZ_TIME_BONUS = 10
    PERFECT_SCORE_THRESHOLD = 100

    # --- Retakes ---
    IMPROVEMENT_BONUS_RATIO = 0.25  # share of the base points for a better retake

    # --- Progress views ---
    RECENT_TRANSACTIONS_LIMIT = 10
    RECENT_ACTIVITY_DAYS = 7


def get_setting(key: str):
    """Return the configured value for ``key``, falling back to the module default."""
    return get_runtime_config(key, getattr(GamificationDefaultConfig, key))

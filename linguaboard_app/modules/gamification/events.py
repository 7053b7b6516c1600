"""
Event Handlers for Gamification Module.

Listens to signals from other modules and triggers gamification logic.
Content screens (quiz, lesson, vocabulary, game) only publish
``activity_completed``; they never import the scoring engine.
"""
from flask import current_app

from linguaboard_app.core.signals import achievement_unlocked, activity_completed


@activity_completed.connect
def on_activity_completed(sender, **kwargs):
    """
    Handle activity_completed signal from content modules.

    Expected kwargs:
        - student_id: int
        - activity_type: str ('COMPLETE_QUIZ', 'COMPLETE_LESSON', ...)
        - reference_id: optional activity id
        - reference_type: optional activity kind ('quiz', 'lesson', ...)
        - language: optional language tag
        - metadata: optional dict (score, timeBonus, minutes_spent)
    """
    from .services.award_engine import AwardEngine

    student_id = kwargs.get('student_id')
    activity_type = kwargs.get('activity_type')

    if not student_id or not activity_type:
        return

    try:
        AwardEngine.award_points(
            student_id,
            activity_type,
            reference_id=kwargs.get('reference_id'),
            reference_kind=kwargs.get('reference_type'),
            language=kwargs.get('language'),
            metadata=kwargs.get('metadata')
        )
    except Exception as e:
        current_app.logger.error(f"[Gamification] Error awarding points: {e}", exc_info=True)


@achievement_unlocked.connect
def on_achievement_unlocked(sender, **kwargs):
    current_app.logger.info(
        f"[Gamification] Student {kwargs.get('student_id')} unlocked "
        f"{kwargs.get('title')} (+{kwargs.get('points')})"
    )

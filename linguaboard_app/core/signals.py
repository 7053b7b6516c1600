"""
Central Signal Registry for Event-Driven Architecture.

Uses blinker (Flask's signal backend) so that the lesson, quiz, vocabulary and
game screens can report completions without importing the scoring engine.

Usage:
    # Publisher (sender)
    from linguaboard_app.core.signals import activity_completed
    activity_completed.send(None, student_id=1, activity_type='COMPLETE_QUIZ', ...)

    # Subscriber (receiver) - in module's events.py
    @activity_completed.connect
    def on_activity_completed(sender, **kwargs):
        ...
"""
from blinker import Namespace

learning_signals = Namespace()

# Signal: Fired by content screens when a student finishes a quiz/lesson/drill/game
# Payload: student_id, activity_type, reference_id, reference_type, language, metadata
activity_completed = learning_signals.signal('activity_completed')

# Signal: Fired after an award has been committed (points may be 0)
# Payload: student_id, activity_type, points, reference_id, reference_type, outcome
points_awarded = learning_signals.signal('points_awarded')

# Signal: Fired after a newly unlocked achievement has been committed
# Payload: student_id, achievement_type, title, points
achievement_unlocked = learning_signals.signal('achievement_unlocked')

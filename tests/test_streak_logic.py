"""
Tests for the pure gamification rules

Tests cover:
- Streak continuation, reset and same-day handling
- Achievement conditions
- Daily summary counter selection
"""

from datetime import date, timedelta

from linguaboard_app.modules.gamification.logics.achievement_rules import (
    ACHIEVEMENT_DEFINITIONS,
    activity_achievements,
    milestone_achievements,
    streak_achievements,
)
from linguaboard_app.modules.gamification.logics.daily_logic import counter_for, merge_languages
from linguaboard_app.modules.gamification.logics.streak_logic import next_streak_state, start_streak

TODAY = date(2024, 3, 10)


class TestNextStreakState:
    """Calendar-day streak arithmetic."""

    def test_first_activity(self):
        state = start_streak(TODAY)

        assert (state.current_streak, state.longest_streak) == (1, 1)
        assert state.last_activity_date == TODAY
        assert state.increased

    def test_consecutive_day_extends_streak(self):
        state = next_streak_state(3, 3, TODAY - timedelta(days=1), TODAY)

        assert state.current_streak == 4
        assert state.longest_streak == 4
        assert state.increased

    def test_same_day_keeps_counters(self):
        state = next_streak_state(3, 5, TODAY, TODAY)

        assert (state.current_streak, state.longest_streak) == (3, 5)
        assert not state.increased

    def test_gap_resets_but_keeps_longest(self):
        state = next_streak_state(4, 6, TODAY - timedelta(days=2), TODAY)

        assert state.current_streak == 1
        assert state.longest_streak == 6
        assert state.last_activity_date == TODAY
        assert not state.increased

    def test_future_last_date_resets(self):
        """Clock skew: a last date after today starts a new streak."""
        state = next_streak_state(5, 5, TODAY + timedelta(days=1), TODAY)

        assert state.current_streak == 1
        assert state.longest_streak == 5

    def test_missing_last_date_resets(self):
        state = next_streak_state(0, 0, None, TODAY)

        assert (state.current_streak, state.longest_streak) == (1, 1)
        assert state.increased

    def test_current_never_exceeds_longest(self):
        state = next_streak_state(9, 9, TODAY - timedelta(days=1), TODAY)

        assert state.current_streak <= state.longest_streak


class TestAchievementRules:
    """Which achievement types a fact unlocks."""

    def test_definitions_table(self):
        assert ACHIEVEMENT_DEFINITIONS['first_quiz'].points == 25
        assert ACHIEVEMENT_DEFINITIONS['streak_100_days'].title == 'Century Scholar'
        assert len(ACHIEVEMENT_DEFINITIONS) == 9

    def test_quiz_achievements(self):
        assert activity_achievements('COMPLETE_QUIZ', {'score': 80}) == ['first_quiz']
        assert activity_achievements('COMPLETE_QUIZ', {'score': 100}) == ['first_quiz', 'quiz_perfectionist']

    def test_lesson_achievement(self):
        assert activity_achievements('COMPLETE_LESSON', {'score': 100}) == ['lesson_completed']

    def test_other_activities_have_none(self):
        assert activity_achievements('COMPLETE_VOCABULARY') == []
        assert activity_achievements('IMPROVEMENT_BONUS', {'score': 100}) == []

    def test_point_milestones(self):
        assert milestone_achievements(99) == []
        assert milestone_achievements(105) == ['points_milestone_100']
        assert milestone_achievements(1000) == [
            'points_milestone_100', 'points_milestone_500', 'points_milestone_1000'
        ]

    def test_streak_milestones(self):
        assert streak_achievements(6) == []
        assert streak_achievements(7) == ['streak_7_days']
        assert streak_achievements(30) == ['streak_7_days', 'streak_30_days']


class TestDailyLogic:
    """Daily summary helpers."""

    def test_counter_for_families(self):
        assert counter_for('COMPLETE_QUIZ') == 'quizzes_completed'
        assert counter_for('COMPLETE_LESSON') == 'lessons_completed'
        assert counter_for('COMPLETE_VOCABULARY') == 'vocabulary_practiced'
        assert counter_for('COMPLETE_GAME') == 'games_played'

    def test_counter_matching_is_case_insensitive_and_ordered(self):
        assert counter_for('lesson_review') == 'lessons_completed'
        # QUIZ is checked before GAME
        assert counter_for('QUIZ_GAME') == 'quizzes_completed'

    def test_unmatched_types(self):
        assert counter_for('IMPROVEMENT_BONUS') is None
        assert counter_for(None) is None

    def test_merge_languages(self):
        existing = ['en']

        merged = merge_languages(existing, 'vi')

        assert merged == ['en', 'vi']
        assert merged is not existing
        assert merge_languages(merged, 'en') == ['en', 'vi']
        assert merge_languages(None, None) == []

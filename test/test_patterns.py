from datetime import datetime

from scheduling.patterns import analyze_user_patterns, most_productive_hour, peak_hours
from study_planner.models import Habit, UserPatterns


def _habit(*hours):
    return Habit(
        id="h",
        title="Habit",
        completions=[datetime(2026, 3, 1 + i, h, 5) for i, h in enumerate(hours)],
    )


def test_no_history_defaults_to_ten():
    assert most_productive_hour([]) == 10
    assert most_productive_hour([Habit(id="h", title="Empty")]) == 10


def test_mode_of_completion_hours():
    assert most_productive_hour([_habit(9, 14, 14), _habit(20)]) == 14


def test_tie_goes_to_first_seen_hour():
    assert most_productive_hour([_habit(9, 14, 14, 9)]) == 9
    assert most_productive_hour([_habit(7), _habit(18, 18, 7)]) == 7


def test_completion_records_are_accepted():
    habit = Habit(
        id="h",
        title="Read",
        completions=[{"date": "2026-03-01T21:30:00"}, {"date": "2026-03-02T21:10:00"}],
    )
    assert most_productive_hour([habit]) == 21


def test_analytics_fill_pattern_and_bad_values_fall_back():
    patterns = analyze_user_patterns(
        [_habit(8)],
        {"averageSessionLength": 50, "preferredBreakLength": None, "completionRate": "bad"},
    )
    assert patterns.most_productive_hour == 8
    assert patterns.average_session_length == 50
    assert patterns.preferred_break_length == 15
    assert patterns.completion_rate == 0.7


def test_analytics_not_a_dict():
    patterns = analyze_user_patterns([], analytics=["nope"])
    assert patterns == UserPatterns()


def test_peak_hours_window():
    assert peak_hours(UserPatterns(most_productive_hour=15)) == [15, 16]
    assert peak_hours(None) == [10, 11]

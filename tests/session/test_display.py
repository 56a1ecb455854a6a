import pytest

from playmode.session.display import (
    Urgency,
    countdown_urgency,
    estimate_class_seconds,
    format_clock,
    progress_fraction,
)


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, "0:00"),
        (9, "0:09"),
        (60, "1:00"),
        (90, "1:30"),
        (605, "10:05"),
        (-3, "0:00"),
    ],
)
def test_format_clock(seconds, expected):
    assert format_clock(seconds) == expected


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, Urgency.CRITICAL),
        (10, Urgency.CRITICAL),
        (11, Urgency.CAUTION),
        (30, Urgency.CAUTION),
        (31, Urgency.NORMAL),
    ],
)
def test_countdown_urgency_thresholds(seconds, expected):
    assert countdown_urgency(seconds) == expected


def test_progress_counts_current_step():
    assert progress_fraction(0, 4) == 0.25
    assert progress_fraction(3, 4) == 1.0


def test_progress_is_clamped_and_safe_for_empty_class():
    assert progress_fraction(5, 4) == 1.0
    assert progress_fraction(0, 0) == 0.0


def test_estimate_adds_one_transition_between_each_pair(make_steps):
    assert estimate_class_seconds(make_steps(120, 45, 40, 90), 10) == 295 + 30


def test_estimate_single_step_has_no_transition(make_steps):
    assert estimate_class_seconds(make_steps(45), 10) == 45


def test_estimate_empty_class():
    assert estimate_class_seconds([], 10) == 0

from datetime import date

import pytest

from app.schemas.schedule import ScheduleItemDefinition
from app.services.recurrence import expand_recurring_item, merge_week, schedule_signature

# Sunday 7 January 2024
WEEK = date(2024, 1, 7)


def make_item(**overrides) -> ScheduleItemDefinition:
    values = {
        "id": "42",
        "origin_id": "42",
        "schedule_week_start": WEEK,
        "title": "Upper Body",
        "day": 1,
        "start_time": "18:00",
        "end_time": "19:00",
        "is_recurring": True,
        "repeat_pattern": "weekly",
        "repeat_interval": 1,
        "generator_data": {"exercises": [{"name": "Push Up", "sets": 3, "reps": "10"}]},
    }
    values.update(overrides)
    return ScheduleItemDefinition(**values)


def days_of(occurrences):
    return [occurrence.day for occurrence in occurrences]


def test_non_recurring_item_has_no_occurrences():
    """Test that an item without recurrence never expands"""
    item = make_item(is_recurring=False)
    assert expand_recurring_item(item, date(2024, 1, 14)) == []


def test_weekly_interval_only_hits_matching_weeks():
    """Test that a bi-weekly item only appears every other week"""
    item = make_item(repeat_interval=2)

    assert expand_recurring_item(item, date(2024, 1, 14)) == []
    assert days_of(expand_recurring_item(item, date(2024, 1, 21))) == [1]
    assert expand_recurring_item(item, date(2024, 1, 28)) == []
    assert days_of(expand_recurring_item(item, date(2024, 2, 4))) == [1]


def test_virtual_occurrence_fields():
    """Test the id, origin and flags of a computed occurrence"""
    occurrence = expand_recurring_item(make_item(), date(2024, 1, 21))[0]

    assert occurrence.id == "42-2024-01-21-1"
    assert occurrence.origin_id == "42"
    assert occurrence.is_virtual is True
    assert occurrence.is_recurring is True
    assert occurrence.schedule_week_start is None
    assert occurrence.repeat_pattern == "weekly"
    assert occurrence.title == "Upper Body"
    assert occurrence.generator_data == {"exercises": [{"name": "Push Up", "sets": 3, "reps": "10"}]}


def test_target_week_is_normalized_to_sunday():
    """Test that any date inside a week resolves to that week"""
    # Wednesday 24 January 2024 is inside the week starting Sunday the 21st
    occurrences = expand_recurring_item(make_item(), date(2024, 1, 24))
    assert [o.id for o in occurrences] == ["42-2024-01-21-1"]


def test_no_expansion_before_origin_week():
    """Test that weeks before the anchor week stay empty"""
    assert expand_recurring_item(make_item(), date(2023, 12, 31)) == []


def test_weekly_days_of_week_skip_days_before_origin_occurrence():
    """Test that the anchor week skips days before the first occurrence"""
    # Created on Wednesday; Monday of the origin week precedes the first occurrence
    item = make_item(day=3, repeat_days_of_week=[1, 3, 5])

    assert days_of(expand_recurring_item(item, WEEK)) == [3, 5]
    assert days_of(expand_recurring_item(item, date(2024, 1, 14))) == [1, 3, 5]


def test_weekly_empty_days_of_week_falls_back_to_item_day():
    """Test that an empty weekday list repeats on the item's own day"""
    item = make_item(day=4, repeat_days_of_week=[])
    assert days_of(expand_recurring_item(item, date(2024, 1, 14))) == [4]


def test_end_date_is_inclusive():
    """Test that an occurrence on the end date is still produced"""
    # Monday 22 January 2024
    item = make_item(repeat_ends_on=date(2024, 1, 22))

    assert days_of(expand_recurring_item(item, date(2024, 1, 21))) == [1]
    assert expand_recurring_item(item, date(2024, 1, 28)) == []


def test_end_date_cuts_inside_a_week():
    """Test that days after the end date are dropped within a week"""
    item = make_item(repeat_days_of_week=[1, 3, 5], repeat_ends_on=date(2024, 1, 17))
    assert days_of(expand_recurring_item(item, date(2024, 1, 14))) == [1, 3]


def test_daily_interval_wraps_across_weeks():
    """Test that a daily interval carries over week boundaries"""
    # Origin occurrence Monday 8 January, every third day
    item = make_item(repeat_pattern="daily", repeat_interval=3)

    assert days_of(expand_recurring_item(item, WEEK)) == [1, 4]
    assert days_of(expand_recurring_item(item, date(2024, 1, 14))) == [0, 3, 6]
    assert days_of(expand_recurring_item(item, date(2024, 1, 21))) == [2, 5]


def test_yearly_matches_month_and_day():
    """Test that a yearly item lands on the same month and day"""
    # Friday 15 March 2024, in the week starting Sunday 10 March
    item = make_item(repeat_pattern="yearly", schedule_week_start=date(2024, 3, 10), day=5)

    occurrences = expand_recurring_item(item, date(2025, 3, 9))
    assert days_of(occurrences) == [6]  # Saturday 15 March 2025
    assert expand_recurring_item(item, date(2025, 3, 16)) == []
    assert expand_recurring_item(item, date(2024, 3, 17)) == []


def test_yearly_interval():
    """Test that a yearly interval skips off years"""
    item = make_item(repeat_pattern="yearly", repeat_interval=2, schedule_week_start=date(2024, 3, 10), day=5)

    assert expand_recurring_item(item, date(2025, 3, 9)) == []
    assert len(expand_recurring_item(item, date(2026, 3, 15))) == 1


@pytest.mark.parametrize("interval", [0, -3, None])
def test_invalid_interval_defaults_to_one(interval):
    """Test that missing or non-positive intervals behave as one"""
    item = make_item(repeat_interval=interval)
    assert days_of(expand_recurring_item(item, date(2024, 1, 14))) == [1]


@pytest.mark.parametrize("pattern", ["fortnightly", None, ""])
def test_unknown_pattern_is_treated_as_weekly(pattern):
    """Test that unknown or empty patterns repeat weekly"""
    item = make_item(repeat_pattern=pattern)
    assert days_of(expand_recurring_item(item, date(2024, 1, 14))) == [1]


def test_missing_anchor_week_raises():
    """Test that a recurring item needs its anchor week"""
    with pytest.raises(ValueError):
        expand_recurring_item(make_item(schedule_week_start=None), date(2024, 1, 14))


def test_virtual_occurrences_do_not_share_payloads():
    """Test that occurrences get their own copy of generator data"""
    item = make_item(repeat_days_of_week=[1, 3])
    first, second = expand_recurring_item(item, date(2024, 1, 14))

    first.generator_data["exercises"][0]["name"] = "Changed"

    assert second.generator_data["exercises"][0]["name"] == "Push Up"
    assert item.generator_data["exercises"][0]["name"] == "Push Up"


def test_signature_is_case_insensitive():
    """Test that signatures ignore title case"""
    assert schedule_signature(make_item(title="Leg Day", day=2)) == "leg day-18:00-2"


def test_merge_prefers_real_items():
    """Test that a stored item hides a matching occurrence"""
    real = make_item(id="7", title="Leg Day", day=2, is_recurring=False, schedule_week_start=date(2024, 1, 14))
    source = make_item(id="3", title="LEG DAY", day=2)

    merged = merge_week([real], [source], date(2024, 1, 14))

    assert [item.id for item in merged] == ["7"]
    assert merged[0].is_virtual is False


def test_merge_first_virtual_wins():
    """Test that the first of two matching occurrences is kept"""
    first = make_item(id="1", title="Run")
    second = make_item(id="2", title="run")

    merged = merge_week([], [first, second], date(2024, 1, 14))

    assert [item.origin_id for item in merged] == ["1"]


def test_merge_deduplicates_origin_week_against_itself():
    """Test that a stored recurring item is not doubled in its own week"""
    # The stored item recurs and is also the real item of its own week
    item = make_item(id="9")
    merged = merge_week([item], [item], WEEK)
    assert [m.id for m in merged] == ["9"]


def test_merge_sorts_by_day_then_start_time():
    """Test the ordering of the merged week"""
    real = [
        make_item(id="r1", title="Evening", day=3, start_time="19:00", is_recurring=False),
        make_item(id="r2", title="Morning", day=3, start_time="07:30", is_recurring=False),
    ]
    sources = [
        make_item(id="s1", title="Swim", day=5, start_time="06:00"),
        make_item(id="s2", title="Yoga", day=0, start_time="09:00"),
        make_item(id="s3", title="Lift", day=3, start_time="12:00"),
    ]

    merged = merge_week(real, sources, date(2024, 1, 14))
    keys = [(item.day, item.start_time) for item in merged]

    assert keys == sorted(keys)
    assert [item.title for item in merged] == ["Yoga", "Morning", "Lift", "Evening", "Swim"]


def test_merge_skips_failing_items_and_keeps_the_rest():
    """Test that one broken recurring item does not break the week"""
    broken = make_item(id="broken", title="Broken", schedule_week_start=None)
    healthy = make_item(id="ok", title="Healthy")

    merged = merge_week([], [broken, healthy], date(2024, 1, 14))

    assert [item.origin_id for item in merged] == ["ok"]


def test_merge_ignores_non_recurring_sources():
    """Test that non-recurring sources are not expanded"""
    merged = merge_week([], [make_item(is_recurring=False)], date(2024, 1, 14))
    assert merged == []

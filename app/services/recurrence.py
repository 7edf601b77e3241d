"""
Recurring schedule expansion.

Stored schedule items may repeat daily, weekly or yearly. For a requested week
we compute the "virtual" occurrences those items produce and merge them with
the items actually stored for that week.
"""
import logging
from datetime import date
from typing import Iterable, List, Set

from app.schemas.schedule import ScheduleItemDefinition
from app.utils.constant import REPEAT_PATTERNS
from app.utils.dates import DateLike, add_days, days_between, start_of_day, week_key, week_start_for

logger = logging.getLogger(__name__)

DEFAULT_REPEAT_PATTERN = "weekly"


def schedule_signature(item: ScheduleItemDefinition) -> str:
    """
    Content key used to detect a virtual occurrence that duplicates an existing item.
    """
    return f"{item.title}-{item.start_time}-{item.day}".lower()


def _resolve_pattern(item: ScheduleItemDefinition) -> str:
    pattern = (item.repeat_pattern or DEFAULT_REPEAT_PATTERN).lower()
    if pattern not in REPEAT_PATTERNS:
        logger.warning("Unknown repeat pattern %r on item %s, treating as weekly", item.repeat_pattern, item.id)
        return DEFAULT_REPEAT_PATTERN
    return pattern


def _resolve_interval(item: ScheduleItemDefinition) -> int:
    if item.repeat_interval and item.repeat_interval > 0:
        return item.repeat_interval
    return 1


def _resolve_days_of_week(item: ScheduleItemDefinition) -> List[int]:
    days = [day for day in (item.repeat_days_of_week or []) if isinstance(day, int) and 0 <= day <= 6]
    if not days:
        return [item.day]
    # Keep the stored order but drop repeats so each weekday yields one occurrence
    return list(dict.fromkeys(days))


def _materialize(item: ScheduleItemDefinition, day_of_week: int, key: str) -> ScheduleItemDefinition:
    origin_id = item.id
    return item.model_copy(
        update={
            "id": f"{origin_id}-{key}-{day_of_week}",
            "origin_id": origin_id,
            "day": day_of_week,
            "is_virtual": True,
            "is_recurring": True,
            "schedule_week_start": None,
        },
        deep=True,
    )


def expand_recurring_item(item: ScheduleItemDefinition, target_week_start: DateLike) -> List[ScheduleItemDefinition]:
    """
    Compute the virtual occurrences a recurring item produces in one week.

    Args:
        item: The stored source item. Must carry ``schedule_week_start``.
        target_week_start: Any date inside the requested week

    Returns:
        Zero or more virtual occurrences, one per matching weekday

    Raises:
        ValueError: If the item has no anchor week
    """
    if not item.is_recurring:
        return []
    if item.schedule_week_start is None:
        raise ValueError(f"Recurring item {item.id} has no schedule week start")

    pattern = _resolve_pattern(item)
    interval = _resolve_interval(item)
    origin_week_start = start_of_day(item.schedule_week_start)
    origin_occurrence = add_days(origin_week_start, item.day)
    target_week = week_start_for(target_week_start)

    if target_week < origin_week_start:
        return []

    repeat_ends_on = start_of_day(item.repeat_ends_on) if item.repeat_ends_on else None
    key = week_key(target_week)
    occurrences: List[ScheduleItemDefinition] = []

    def keep(occurrence_date: date) -> bool:
        if occurrence_date < origin_occurrence:
            return False
        if repeat_ends_on is not None and occurrence_date > repeat_ends_on:
            return False
        return True

    if pattern == "weekly":
        diff_weeks = days_between(target_week, origin_week_start) // 7
        if diff_weeks < 0 or diff_weeks % interval != 0:
            return occurrences

        for day_of_week in _resolve_days_of_week(item):
            if keep(add_days(target_week, day_of_week)):
                occurrences.append(_materialize(item, day_of_week, key))

    elif pattern == "daily":
        for day_of_week in range(7):
            occurrence_date = add_days(target_week, day_of_week)
            diff_days = days_between(occurrence_date, origin_occurrence)
            if diff_days >= 0 and diff_days % interval == 0 and keep(occurrence_date):
                occurrences.append(_materialize(item, day_of_week, key))

    elif pattern == "yearly":
        for day_of_week in range(7):
            occurrence_date = add_days(target_week, day_of_week)
            years_diff = occurrence_date.year - origin_occurrence.year
            if years_diff < 0 or years_diff % interval != 0:
                continue
            if (occurrence_date.month, occurrence_date.day) != (origin_occurrence.month, origin_occurrence.day):
                continue
            if keep(occurrence_date):
                occurrences.append(_materialize(item, day_of_week, key))

    return occurrences


def merge_week(
    real_items: Iterable[ScheduleItemDefinition],
    recurring_items: Iterable[ScheduleItemDefinition],
    target_week_start: DateLike,
) -> List[ScheduleItemDefinition]:
    """
    Combine a week's stored items with the virtual occurrences of recurring items.

    Stored items always win over virtual ones with the same signature; among
    virtual occurrences the first one seen wins. A recurring item that fails to
    expand is logged and skipped so one bad record never breaks the week.

    Args:
        real_items: Items stored for the target week
        recurring_items: Every recurring item the user owns, from any week
        target_week_start: Any date inside the requested week

    Returns:
        Items sorted by day, then start time
    """
    real = list(real_items)
    signatures: Set[str] = {schedule_signature(item) for item in real}
    virtual: List[ScheduleItemDefinition] = []

    for source in recurring_items:
        if not source.is_recurring:
            continue
        try:
            occurrences = expand_recurring_item(source, target_week_start)
        except Exception as e:
            logger.warning("Skipping recurring item %s: %s", source.id, str(e))
            continue

        for occurrence in occurrences:
            signature = schedule_signature(occurrence)
            if signature in signatures:
                continue
            signatures.add(signature)
            virtual.append(occurrence)

    combined = real + virtual
    combined.sort(key=lambda item: (item.day, item.start_time))
    return combined

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.schedule import Schedule, ScheduleItem
from app.repositories.schedule import ScheduleItemRepository, ScheduleRepository
from app.schemas.schedule import ScheduleItemDefinition
from app.services.recurrence import merge_week
from app.utils.constant import ERROR_MESSAGES
from app.utils.dates import DateLike, add_days, days_between, iter_week_starts, to_date, week_start_for

logger = logging.getLogger(__name__)

# Fields that only exist on computed occurrences or are owned by the schedule row
NON_PERSISTED_FIELDS = {"id", "origin_id", "schedule_id", "schedule_week_start", "is_virtual"}


def to_definition(item: ScheduleItem) -> ScheduleItemDefinition:
    """
    Convert a stored schedule item into the shape the recurrence engine works on.
    """
    item_id = str(item.id)
    return ScheduleItemDefinition(
        id=item_id,
        origin_id=item_id,
        schedule_id=item.schedule_id,
        schedule_week_start=item.schedule.week_start if item.schedule is not None else None,
        type=item.type or "workout",
        title=item.title,
        description=item.description,
        day=item.day,
        start_time=item.start_time,
        end_time=item.end_time,
        category=item.category,
        difficulty=item.difficulty,
        duration=item.duration,
        calories=item.calories,
        is_from_generator=bool(item.is_from_generator),
        generator_data=item.generator_data,
        is_recurring=bool(item.is_recurring),
        repeat_pattern=item.repeat_pattern,
        repeat_interval=item.repeat_interval,
        repeat_ends_on=item.repeat_ends_on,
        repeat_days_of_week=item.repeat_days_of_week,
        recurrence_rule=item.recurrence_rule,
        is_virtual=False,
    )


def to_persisted_fields(item: Dict[str, Any]) -> Dict[str, Any]:
    return {field: value for field, value in item.items() if field not in NON_PERSISTED_FIELDS}


class ScheduleService:
    """
    Service for reading and writing weekly schedules, expanding recurring items on read.
    """

    def __init__(self, db: Session):
        self.db = db
        self.schedule_repo = ScheduleRepository(db)
        self.item_repo = ScheduleItemRepository(db)

    def get_week(self, user_id: int, week_start: DateLike) -> Tuple[Schedule, List[ScheduleItemDefinition]]:
        """
        Get a user's week with stored items merged with recurring occurrences.
        
        Args:
            user_id: The user ID
            week_start: Any date inside the requested week
            
        Returns:
            The (possibly newly created) schedule and its sorted items
        """
        target_week = week_start_for(week_start)
        schedule = self.schedule_repo.get_or_create(user_id, target_week)

        real_items = [to_definition(item) for item in self.item_repo.get_by_schedule_id(schedule.id)]
        recurring_items = self._recurring_definitions(user_id)
        items = merge_week(real_items, recurring_items, target_week)

        logger.info(
            "Schedule %s for week %s: %s stored, %s total items",
            schedule.id, target_week.isoformat(), len(real_items), len(items),
        )
        return schedule, items

    def save_week(
        self,
        user_id: int,
        week_start: DateLike,
        items: Optional[List[Dict[str, Any]]],
        timezone: Optional[str] = None,
    ) -> Schedule:
        """
        Replace the stored items of a user's week.
        
        Args:
            user_id: The user ID
            week_start: Any date inside the week
            items: New item field values; None leaves the stored items untouched
            timezone: Timezone to record on the schedule
            
        Returns:
            The saved schedule
        """
        target_week = week_start_for(week_start)
        schedule = self.schedule_repo.get_or_create(user_id, target_week, timezone)
        if timezone and schedule.timezone != timezone:
            logger.info("Updating schedule %s timezone from %s to %s", schedule.id, schedule.timezone, timezone)
            schedule = self.schedule_repo.update(schedule, {"timezone": timezone})

        if items is not None:
            deleted, created = self.item_repo.replace_for_schedule(
                schedule.id, [to_persisted_fields(item) for item in items]
            )
            logger.info("Schedule %s: replaced %s items with %s", schedule.id, deleted, len(created))

        self.db.refresh(schedule)
        return schedule

    def add_items(self, user_id: int, week_start: DateLike, items: List[Dict[str, Any]]) -> Schedule:
        """
        Append items to a user's week without touching the ones already stored.
        """
        schedule = self.schedule_repo.get_or_create(user_id, week_start_for(week_start))
        self.item_repo.bulk_create(schedule.id, [to_persisted_fields(item) for item in items])
        self.db.refresh(schedule)
        return schedule

    def clear_week(self, user_id: int, week_start: DateLike) -> int:
        """
        Delete every stored item of a user's week.
        
        Returns:
            Number of deleted items
        """
        schedule = self.schedule_repo.get_by_user_and_week(user_id, week_start_for(week_start))
        if not schedule:
            return 0
        deleted = self.item_repo.delete_by_schedule_id(schedule.id)
        logger.info("Cleared %s items from schedule %s", deleted, schedule.id)
        return deleted

    def get_calendar(self, user_id: int, start: DateLike, end: DateLike) -> List[Tuple[date, ScheduleItemDefinition]]:
        """
        Get every occurrence, stored or recurring, dated within an inclusive range.
        
        Args:
            user_id: The user ID
            start: First date of the range
            end: Last date of the range
            
        Returns:
            (date, item) pairs ordered by date and start time
            
        Raises:
            ValueError: If the range is reversed or longer than the configured maximum
        """
        start_date = to_date(start)
        end_date = to_date(end)
        span = days_between(end_date, start_date)
        if span < 0:
            raise ValueError(ERROR_MESSAGES["INVALID_DATE_RANGE"])
        if span > settings.CALENDAR_MAX_RANGE_DAYS:
            raise ValueError(ERROR_MESSAGES["DATE_RANGE_TOO_LONG"].format(max_days=settings.CALENDAR_MAX_RANGE_DAYS))

        # One snapshot of recurring items for the whole range
        recurring_items = self._recurring_definitions(user_id)
        entries: List[Tuple[date, ScheduleItemDefinition]] = []

        for week in iter_week_starts(start_date, end_date):
            schedule = self.schedule_repo.get_by_user_and_week(user_id, week)
            real_items = []
            if schedule:
                real_items = [to_definition(item) for item in self.item_repo.get_by_schedule_id(schedule.id)]

            for item in merge_week(real_items, recurring_items, week):
                occurrence_date = add_days(week, item.day)
                if start_date <= occurrence_date <= end_date:
                    entries.append((occurrence_date, item))

        entries.sort(key=lambda entry: (entry[0], entry[1].start_time))
        return entries

    def _recurring_definitions(self, user_id: int) -> List[ScheduleItemDefinition]:
        return [to_definition(item) for item in self.item_repo.get_recurring_by_user_id(user_id)]

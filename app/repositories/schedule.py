"""
Schedule and schedule item repositories for database operations.
"""
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from app.models.schedule import Schedule, ScheduleItem
from app.repositories.base import BaseRepository


class ScheduleRepository(BaseRepository[Schedule]):
    """
    Repository for Schedule model operations.
    """

    def __init__(self, db: Session):
        super().__init__(Schedule, db)

    def get_by_user_and_week(self, user_id: int, week_start: date) -> Optional[Schedule]:
        """
        Get a user's schedule for the week starting on ``week_start``.
        
        Args:
            user_id: User ID
            week_start: Sunday of the week
            
        Returns:
            Schedule instance or None if not found
        """
        return (
            self.db.query(Schedule)
            .filter(Schedule.user_id == user_id)
            .filter(Schedule.week_start == week_start)
            .first()
        )

    def get_or_create(self, user_id: int, week_start: date, timezone: Optional[str] = None) -> Schedule:
        """
        Get a user's schedule for a week, creating an empty one when missing.
        
        Args:
            user_id: User ID
            week_start: Sunday of the week
            timezone: Timezone stored on a newly created schedule
            
        Returns:
            Schedule instance
        """
        schedule = self.get_by_user_and_week(user_id, week_start)
        if schedule:
            return schedule
        return self.create({"user_id": user_id, "week_start": week_start, "timezone": timezone or "UTC"})


class ScheduleItemRepository(BaseRepository[ScheduleItem]):
    """
    Repository for ScheduleItem model operations.
    """

    def __init__(self, db: Session):
        super().__init__(ScheduleItem, db)

    def get_by_schedule_id(self, schedule_id: int) -> List[ScheduleItem]:
        """
        Get the items of one schedule ordered by day and start time.
        
        Args:
            schedule_id: Schedule ID
            
        Returns:
            List of ScheduleItem instances
        """
        return (
            self.db.query(ScheduleItem)
            .options(joinedload(ScheduleItem.schedule))
            .filter(ScheduleItem.schedule_id == schedule_id)
            .order_by(ScheduleItem.day, ScheduleItem.start_time)
            .all()
        )

    def get_recurring_by_user_id(self, user_id: int) -> List[ScheduleItem]:
        """
        Get every recurring item a user owns, across all weeks, with its schedule loaded.
        
        Args:
            user_id: User ID
            
        Returns:
            List of ScheduleItem instances
        """
        return (
            self.db.query(ScheduleItem)
            .join(Schedule, ScheduleItem.schedule_id == Schedule.id)
            .options(joinedload(ScheduleItem.schedule))
            .filter(Schedule.user_id == user_id)
            .filter(ScheduleItem.is_recurring.is_(True))
            .order_by(Schedule.week_start, ScheduleItem.id)
            .all()
        )

    def bulk_create(self, schedule_id: int, items: List[Dict[str, Any]]) -> List[ScheduleItem]:
        """
        Create several items for one schedule in a single commit.
        
        Args:
            schedule_id: Schedule ID
            items: Field values for each item
            
        Returns:
            Created ScheduleItem instances
        """
        db_items = [ScheduleItem(schedule_id=schedule_id, **item) for item in items]
        self.db.add_all(db_items)
        self.db.commit()
        for db_item in db_items:
            self.db.refresh(db_item)
        return db_items

    def delete_by_schedule_id(self, schedule_id: int) -> int:
        """
        Delete every item of one schedule.
        
        Args:
            schedule_id: Schedule ID
            
        Returns:
            Number of deleted items
        """
        deleted = (
            self.db.query(ScheduleItem)
            .filter(ScheduleItem.schedule_id == schedule_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted

    def replace_for_schedule(self, schedule_id: int, items: List[Dict[str, Any]]) -> Tuple[int, List[ScheduleItem]]:
        """
        Swap every item of one schedule for new ones in a single commit.
        
        The delete and the inserts share one transaction, so a failing insert
        leaves the previously stored items in place.
        
        Args:
            schedule_id: Schedule ID
            items: Field values for each new item
            
        Returns:
            Number of deleted items and the created ScheduleItem instances
        """
        try:
            deleted = (
                self.db.query(ScheduleItem)
                .filter(ScheduleItem.schedule_id == schedule_id)
                .delete(synchronize_session=False)
            )
            db_items = [ScheduleItem(schedule_id=schedule_id, **item) for item in items]
            self.db.add_all(db_items)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        for db_item in db_items:
            self.db.refresh(db_item)
        return deleted, db_items

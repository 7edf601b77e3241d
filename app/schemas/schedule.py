from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ScheduleItemDefinition(BaseModel):
    """
    A schedule entry, either stored ("real") or computed for one week ("virtual").

    ``generator_data`` and ``recurrence_rule`` are opaque payloads: they are
    carried through expansion untouched and never validated structurally.
    """
    id: Optional[str] = None
    origin_id: Optional[str] = None
    schedule_id: Optional[int] = None
    schedule_week_start: Optional[date] = None

    type: str = "workout"
    title: str
    description: Optional[str] = None
    day: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    category: Optional[str] = None
    difficulty: Optional[str] = None
    duration: Optional[int] = None
    calories: Optional[int] = None
    is_from_generator: bool = False
    generator_data: Optional[Dict[str, Any]] = None

    is_recurring: bool = False
    repeat_pattern: Optional[str] = None
    repeat_interval: Optional[int] = None
    repeat_ends_on: Optional[date] = None
    repeat_days_of_week: Optional[List[int]] = None
    recurrence_rule: Optional[Dict[str, Any]] = None

    is_virtual: bool = False


class ScheduleItemCreate(BaseModel):
    type: str = "workout"
    title: str
    description: Optional[str] = None
    day: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    category: Optional[str] = None
    difficulty: Optional[str] = None
    duration: Optional[int] = None
    calories: Optional[int] = None
    is_from_generator: bool = False
    generator_data: Optional[Dict[str, Any]] = None
    is_recurring: bool = False
    repeat_pattern: Optional[str] = None
    repeat_interval: Optional[int] = None
    repeat_ends_on: Optional[date] = None
    repeat_days_of_week: Optional[List[int]] = None
    recurrence_rule: Optional[Dict[str, Any]] = None


class ScheduleSaveRequest(BaseModel):
    week_start: date
    items: Optional[List[ScheduleItemCreate]] = None
    timezone: Optional[str] = None


class ScheduleResponse(BaseModel):
    id: int
    user_id: int
    week_start: date
    timezone: str = "UTC"
    items: List[ScheduleItemDefinition] = []


class CalendarEntry(BaseModel):
    occurrence_date: date
    day_of_week: int
    item: ScheduleItemDefinition


class CalendarResponse(BaseModel):
    start_date: date
    end_date: date
    total_days: int
    entries: List[CalendarEntry] = []


class ScheduleClearResponse(BaseModel):
    success: bool
    deleted: int = 0

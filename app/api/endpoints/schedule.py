from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.security import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.schedule import (CalendarEntry, CalendarResponse,
                                  ScheduleClearResponse, ScheduleResponse,
                                  ScheduleSaveRequest)
from app.services.schedule import ScheduleService, to_definition

router = APIRouter()

@router.get("/", response_model=ScheduleResponse)
def read_schedule(
    week_start: date = Query(..., description="Any date inside the requested week"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get the current user's week with recurring items expanded into it.
    """
    schedule, items = ScheduleService(db).get_week(current_user.id, week_start)
    return ScheduleResponse(
        id=schedule.id,
        user_id=schedule.user_id,
        week_start=schedule.week_start,
        timezone=schedule.timezone or "UTC",
        items=items,
    )

@router.post("/", response_model=ScheduleResponse)
def save_schedule(
    schedule_in: ScheduleSaveRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Replace the stored items of a week. Omitting ``items`` only updates the timezone.
    """
    items = None
    if schedule_in.items is not None:
        items = [item.model_dump() for item in schedule_in.items]

    schedule = ScheduleService(db).save_week(current_user.id, schedule_in.week_start, items, schedule_in.timezone)
    stored = sorted(schedule.items, key=lambda item: (item.day, item.start_time))
    return ScheduleResponse(
        id=schedule.id,
        user_id=schedule.user_id,
        week_start=schedule.week_start,
        timezone=schedule.timezone or "UTC",
        items=[to_definition(item) for item in stored],
    )

@router.delete("/", response_model=ScheduleClearResponse)
def clear_schedule(
    week_start: date = Query(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Delete every stored item of a week.
    """
    deleted = ScheduleService(db).clear_week(current_user.id, week_start)
    return ScheduleClearResponse(success=True, deleted=deleted)

@router.get("/calendar", response_model=CalendarResponse)
def read_calendar(
    start: date = Query(...),
    end: date = Query(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get every stored or recurring occurrence dated within [start, end].
    """
    try:
        entries = ScheduleService(db).get_calendar(current_user.id, start, end)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return CalendarResponse(
        start_date=start,
        end_date=end,
        total_days=(end - start).days + 1,
        entries=[
            CalendarEntry(occurrence_date=occurrence_date, day_of_week=item.day, item=item)
            for occurrence_date, item in entries
        ],
    )

from pydantic import BaseModel, ConfigDict
from typing import List, Optional

class PreferencesBase(BaseModel):
    days_per_week: Optional[int] = None
    preferred_days: Optional[List[int]] = None
    preferred_time: Optional[str] = None
    repeat_interval_weeks: Optional[int] = None
    timezone: Optional[str] = None
    difficulty: Optional[str] = None
    focus_areas: Optional[List[str]] = None
    available_equipment: Optional[List[str]] = None
    include_cardio: Optional[bool] = None

class PreferencesUpdate(PreferencesBase):
    pass

class PreferencesResponse(PreferencesBase):
    id: int
    user_id: int

    model_config = ConfigDict(populate_by_name=True,from_attributes=True)

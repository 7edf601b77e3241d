from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.schedule import ScheduleItemCreate, ScheduleItemDefinition


class MuscleTarget(BaseModel):
    name: str
    is_primary: bool = False


class TemplateExerciseCandidate(BaseModel):
    name: str
    description: Optional[str] = None
    instructions: Optional[str] = None
    target_sets: Optional[int] = None
    target_reps: Optional[str] = None
    rest_seconds: Optional[int] = None
    muscles: List[MuscleTarget] = []
    equipment: List[str] = []


class WorkoutTemplateCandidate(BaseModel):
    """Read-only view of a stored workout template offered to the generator."""
    id: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    difficulty: Optional[str] = None
    estimated_duration: Optional[int] = None
    exercises: List[TemplateExerciseCandidate] = []


class GenerationCriteria(BaseModel):
    days_per_week: int = Field(default=3, ge=1, le=7)
    preferred_days: List[int] = []
    difficulty: Optional[str] = None
    focus: List[str] = []
    preferred_start_time: str = "18:00"
    repeat_interval_weeks: int = Field(default=1, ge=1)
    timezone: Optional[str] = None
    allow_back_to_back: bool = False
    include_cardio: bool = False
    allowed_equipment: List[str] = []


class GeneratedTemplateMetadata(BaseModel):
    source: str = "generated"
    generated_at: Optional[datetime] = None
    criteria: Optional[GenerationCriteria] = None
    tags: List[str] = []
    insights: List[str] = []
    allowed_equipment: List[str] = []


class GeneratedScheduleTemplate(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    items: List[ScheduleItemDefinition] = []
    is_default: bool = False
    is_public: bool = False
    usage_count: int = 0
    metadata: Optional[GeneratedTemplateMetadata] = None


class TemplateGenerationRequest(BaseModel):
    """Every field is optional; absent or empty values fall back to stored preferences."""
    count: Optional[int] = None
    days_per_week: Optional[int] = None
    preferred_days: Optional[List[int]] = None
    difficulty: Optional[str] = None
    focus: Optional[List[str]] = None
    preferred_start_time: Optional[str] = None
    repeat_interval_weeks: Optional[int] = None
    timezone: Optional[str] = None
    allow_back_to_back: Optional[bool] = None
    include_cardio: Optional[bool] = None
    allowed_equipment: Optional[List[str]] = None


class TemplateGenerationResponse(BaseModel):
    templates: List[GeneratedScheduleTemplate]
    criteria: GenerationCriteria
    available_categories: List[str] = []
    available_difficulties: List[str] = []
    available_equipment: List[str] = []


class ScheduleTemplateUpdate(BaseModel):
    """Fields left out keep their stored values."""
    name: Optional[str] = None
    description: Optional[str] = None
    is_public: Optional[bool] = None
    items: Optional[List[ScheduleItemCreate]] = None


class RecommendedTemplatesResponse(BaseModel):
    templates: List[GeneratedScheduleTemplate]


class ScheduleTemplateResponse(BaseModel):
    id: str
    user_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    items: List[ScheduleItemDefinition] = []
    template_metadata: Optional[dict] = None
    is_default: bool = False
    is_public: bool = False
    usage_count: int = 0

    model_config = ConfigDict(from_attributes=True)

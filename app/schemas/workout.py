from pydantic import BaseModel, ConfigDict
from typing import List, Optional

from app.schemas.template import MuscleTarget

class ExerciseBase(BaseModel):
    name: str
    description: Optional[str] = None
    instructions: Optional[str] = None
    muscles: List[MuscleTarget] = []
    equipment: List[str] = []

class ExerciseResponse(ExerciseBase):
    id: int

    model_config = ConfigDict(from_attributes=True)

class WorkoutTemplateExerciseCreate(BaseModel):
    exercise: ExerciseBase
    target_sets: Optional[int] = None
    target_reps: Optional[str] = None
    rest_seconds: Optional[int] = None

class WorkoutTemplateExerciseResponse(BaseModel):
    order: int
    target_sets: Optional[int] = None
    target_reps: Optional[str] = None
    rest_seconds: Optional[int] = None
    exercise: ExerciseResponse

    model_config = ConfigDict(from_attributes=True)

class WorkoutTemplateBase(BaseModel):
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    difficulty: Optional[str] = None
    estimated_duration: Optional[int] = None
    is_public: Optional[bool] = False

class WorkoutTemplateCreate(WorkoutTemplateBase):
    exercises: List[WorkoutTemplateExerciseCreate] = []

class WorkoutTemplateResponse(WorkoutTemplateBase):
    id: int
    user_id: Optional[int] = None
    is_predefined: bool = False
    usage_count: int = 0
    exercises: List[WorkoutTemplateExerciseResponse] = []

    model_config = ConfigDict(from_attributes=True)

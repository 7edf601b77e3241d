from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.repositories.workout_template import WorkoutTemplateRepository
from app.schemas.workout import WorkoutTemplateCreate, WorkoutTemplateResponse
from app.utils.constant import ERROR_MESSAGES

router = APIRouter()

@router.get("/", response_model=List[WorkoutTemplateResponse])
def read_workout_templates(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get workout templates available to the current user: own, predefined and public.
    """
    return WorkoutTemplateRepository(db).get_eligible_for_user(current_user.id, limit=settings.MAX_TEMPLATE_CANDIDATES)

@router.get("/{template_id}", response_model=WorkoutTemplateResponse)
def read_workout_template(
    template_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get a single workout template the current user can access.
    """
    template = WorkoutTemplateRepository(db).get_by_id(template_id)
    if not template or not (template.user_id == current_user.id or template.is_predefined or template.is_public):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ERROR_MESSAGES["WORKOUT_TEMPLATE_NOT_FOUND"])
    return template

@router.post("/", response_model=WorkoutTemplateResponse, status_code=status.HTTP_201_CREATED)
def create_workout_template(
    template_in: WorkoutTemplateCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Create a workout template, with its exercises, owned by the current user.
    """
    template_data = template_in.model_dump(exclude={"exercises"})
    template_data["user_id"] = current_user.id
    exercises = [entry.model_dump() for entry in template_in.exercises]
    return WorkoutTemplateRepository(db).create_with_exercises(template_data, exercises)

import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.security import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.schedule import ScheduleResponse
from app.schemas.template import (GeneratedScheduleTemplate,
                                  RecommendedTemplatesResponse,
                                  ScheduleTemplateResponse,
                                  ScheduleTemplateUpdate,
                                  TemplateGenerationRequest,
                                  TemplateGenerationResponse)
from app.services.schedule import ScheduleService
from app.services.templates import TemplateService
from app.utils.constant import ERROR_MESSAGES

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/generate", response_model=TemplateGenerationResponse)
def generate_templates(
    request_in: TemplateGenerationRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Generate recurring schedule templates from the workout templates available to the user.

    Request fields override the user's stored preferences when present and non-empty.
    """
    overrides = request_in.model_dump(exclude={"count"}, exclude_none=True)
    try:
        result = TemplateService(db).generate_for_user(current_user.id, overrides, request_in.count)
    except Exception:
        logger.exception("Error generating schedule templates for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=ERROR_MESSAGES["GENERATION_FAILED"])
    return result

@router.get("/recommended", response_model=RecommendedTemplatesResponse)
def read_recommended_templates(
    count: int = Query(3, description="Number of templates, clamped to 1-6"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get default and public templates, topped up with templates generated from stored preferences.
    """
    try:
        templates = TemplateService(db).recommend(current_user.id, count)
    except Exception:
        logger.exception("Error recommending schedule templates for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=ERROR_MESSAGES["RECOMMENDATION_FAILED"])
    return RecommendedTemplatesResponse(templates=templates)

@router.get("/", response_model=List[ScheduleTemplateResponse])
def read_templates(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get the current user's saved schedule templates.
    """
    return TemplateService(db).list_templates(current_user.id)

@router.post("/", response_model=ScheduleTemplateResponse, status_code=status.HTTP_201_CREATED)
def save_template(
    template_in: GeneratedScheduleTemplate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Save a (generated or hand-authored) schedule template.
    """
    try:
        return TemplateService(db).save_template(current_user.id, template_in)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

@router.get("/{template_id}", response_model=ScheduleTemplateResponse)
def read_template(
    template_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get one saved template the user owns, or a default or public one.
    """
    template = TemplateService(db).get_template(current_user.id, template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ERROR_MESSAGES["TEMPLATE_NOT_FOUND"])
    return template

@router.put("/{template_id}", response_model=ScheduleTemplateResponse)
def update_template(
    template_id: str,
    update_in: ScheduleTemplateUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update the name, description, visibility or items of a template the user owns.
    """
    template = TemplateService(db).update_template(current_user.id, template_id, update_in)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ERROR_MESSAGES["TEMPLATE_NOT_FOUND"])
    return template

@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(
    template_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Delete a saved schedule template.
    """
    if not TemplateService(db).delete_template(current_user.id, template_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ERROR_MESSAGES["TEMPLATE_NOT_FOUND"])

@router.post("/{template_id}/apply", response_model=ScheduleResponse)
def apply_template(
    template_id: str,
    week_start: date = Query(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Add a saved template's items to a week and return the expanded week.
    """
    schedule = TemplateService(db).apply_template(current_user.id, template_id, week_start)
    if not schedule:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ERROR_MESSAGES["TEMPLATE_NOT_FOUND"])

    schedule, items = ScheduleService(db).get_week(current_user.id, schedule.week_start)
    return ScheduleResponse(
        id=schedule.id,
        user_id=schedule.user_id,
        week_start=schedule.week_start,
        timezone=schedule.timezone or "UTC",
        items=items,
    )

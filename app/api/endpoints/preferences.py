from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.security import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.preferences import PreferencesResponse, PreferencesUpdate
from app.services.preferences import PreferencesService
from app.utils.constant import ERROR_MESSAGES

router = APIRouter()

@router.get("/me", response_model=PreferencesResponse)
def read_preferences_me(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get current user's workout preferences.
    """
    preferences = PreferencesService(db).get_preferences_by_user_id(current_user.id)
    if not preferences:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=ERROR_MESSAGES["PREFERENCES_NOT_FOUND"]
        )
    return preferences

@router.put("/me", response_model=PreferencesResponse)
def update_preferences_me(
    preferences_in: PreferencesUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Create or update current user's workout preferences.
    """
    update_data = preferences_in.model_dump(exclude_unset=True)
    return PreferencesService(db).upsert_preferences(current_user.id, update_data)

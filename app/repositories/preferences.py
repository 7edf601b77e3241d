"""
Preferences repository for database operations.
"""
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from app.models.preferences import Preferences
from app.repositories.base import BaseRepository

JSON_FIELDS = ("preferred_days", "focus_areas", "available_equipment")


class PreferencesRepository(BaseRepository[Preferences]):
    """
    Repository for Preferences model operations.
    """

    def __init__(self, db: Session):
        super().__init__(Preferences, db)

    def get_by_user_id(self, user_id: int) -> Optional[Preferences]:
        """
        Get preferences by user ID.
        
        Args:
            user_id: User ID
            
        Returns:
            Preferences instance or None if not found
        """
        return self.get_one_by(user_id=user_id)

    def update_with_flag_modified(self, preferences: Preferences, values: Dict[str, Any]) -> Preferences:
        """
        Update fields, flagging JSON list columns as modified so in-place edits are persisted.
        
        Args:
            preferences: Preferences instance to update
            values: Field name and value pairs to update
            
        Returns:
            Updated Preferences instance
        """
        for field, value in values.items():
            if not hasattr(preferences, field):
                continue
            setattr(preferences, field, value)
            if field in JSON_FIELDS:
                flag_modified(preferences, field)
        self.db.add(preferences)
        self.db.commit()
        self.db.refresh(preferences)
        return preferences

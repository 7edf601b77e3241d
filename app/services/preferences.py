from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.models.preferences import Preferences
from app.repositories.preferences import PreferencesRepository


class PreferencesService:
    def __init__(self, db: Session):
        self.db = db
        self.preferences_repo = PreferencesRepository(db)

    def get_preferences_by_user_id(self, user_id: int) -> Optional[Preferences]:
        """Return the stored workout preferences for a user, or None."""
        return self.preferences_repo.get_by_user_id(user_id)

    def upsert_preferences(self, user_id: int, values: Dict[str, Any]) -> Preferences:
        """Update or create a user's Preferences.

        Only fields present in ``values`` are written, so a partial update
        preserves everything else that is stored.
        """
        preferences = self.preferences_repo.get_by_user_id(user_id)
        if not preferences:
            preferences = self.preferences_repo.create({"user_id": user_id})
        return self.preferences_repo.update_with_flag_modified(preferences, values)

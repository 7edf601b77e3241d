"""
Schedule template repository for database operations.
"""
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.schedule import ScheduleTemplate
from app.repositories.base import BaseRepository


class ScheduleTemplateRepository(BaseRepository[ScheduleTemplate]):
    """
    Repository for ScheduleTemplate model operations.
    """

    def __init__(self, db: Session):
        super().__init__(ScheduleTemplate, db)

    def get_by_user_id(self, user_id: int, skip: int = 0, limit: int = 100) -> List[ScheduleTemplate]:
        return (
            self.db.query(ScheduleTemplate)
            .filter(ScheduleTemplate.user_id == user_id)
            .order_by(ScheduleTemplate.usage_count.desc(), ScheduleTemplate.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_for_user(self, template_id: str, user_id: int) -> Optional[ScheduleTemplate]:
        return self.get_one_by(id=template_id, user_id=user_id)

    def get_accessible(self, template_id: str, user_id: int) -> Optional[ScheduleTemplate]:
        """
        Get a template the user owns, or any default or public template.
        
        Args:
            template_id: Schedule template ID
            user_id: User ID
            
        Returns:
            ScheduleTemplate instance or None if not found
        """
        return (
            self.db.query(ScheduleTemplate)
            .filter(ScheduleTemplate.id == template_id)
            .filter(
                or_(
                    ScheduleTemplate.user_id == user_id,
                    ScheduleTemplate.is_default.is_(True),
                    ScheduleTemplate.is_public.is_(True),
                )
            )
            .first()
        )

    def get_shared(self, limit: int) -> List[ScheduleTemplate]:
        """
        Get default and public templates, defaults first, then most used and most recent.
        
        Args:
            limit: Maximum number of templates to return
            
        Returns:
            List of ScheduleTemplate instances
        """
        return (
            self.db.query(ScheduleTemplate)
            .filter(or_(ScheduleTemplate.is_default.is_(True), ScheduleTemplate.is_public.is_(True)))
            .order_by(
                ScheduleTemplate.is_default.desc(),
                ScheduleTemplate.usage_count.desc(),
                ScheduleTemplate.updated_at.desc(),
                ScheduleTemplate.id,
            )
            .limit(limit)
            .all()
        )

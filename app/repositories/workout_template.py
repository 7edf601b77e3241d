"""
Workout template repository for database operations.
"""
from typing import Any, Dict, List

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from app.models.workout import Exercise, WorkoutTemplate, WorkoutTemplateExercise
from app.repositories.base import BaseRepository


class WorkoutTemplateRepository(BaseRepository[WorkoutTemplate]):
    """
    Repository for WorkoutTemplate model operations.
    """

    def __init__(self, db: Session):
        super().__init__(WorkoutTemplate, db)

    def get_eligible_for_user(self, user_id: int, limit: int = 128) -> List[WorkoutTemplate]:
        """
        Get templates a user may schedule: their own, predefined and public ones.
        
        Args:
            user_id: User ID
            limit: Maximum number of templates to return
            
        Returns:
            WorkoutTemplate instances with exercises loaded, most used and most recent first
        """
        return (
            self.db.query(WorkoutTemplate)
            .options(
                selectinload(WorkoutTemplate.exercises).selectinload(WorkoutTemplateExercise.exercise)
            )
            .filter(
                or_(
                    WorkoutTemplate.user_id == user_id,
                    WorkoutTemplate.is_predefined.is_(True),
                    WorkoutTemplate.is_public.is_(True),
                )
            )
            .order_by(WorkoutTemplate.usage_count.desc(), WorkoutTemplate.updated_at.desc(), WorkoutTemplate.id.desc())
            .limit(limit)
            .all()
        )

    def create_with_exercises(self, template_in: Dict[str, Any], exercises: List[Dict[str, Any]]) -> WorkoutTemplate:
        """
        Create a template together with its exercises.
        
        Args:
            template_in: Template field values
            exercises: One entry per exercise with an ``exercise`` dict and target fields
            
        Returns:
            Created WorkoutTemplate instance
        """
        template = WorkoutTemplate(**template_in)
        self.db.add(template)
        self.db.flush()  # get id for FK relationships

        for idx, entry in enumerate(exercises):
            exercise = Exercise(**entry["exercise"])
            self.db.add(exercise)
            self.db.flush()
            self.db.add(WorkoutTemplateExercise(
                template_id=template.id,
                exercise_id=exercise.id,
                order=idx + 1,
                target_sets=entry.get("target_sets"),
                target_reps=entry.get("target_reps"),
                rest_seconds=entry.get("rest_seconds"),
            ))

        self.db.commit()
        self.db.refresh(template)
        return template

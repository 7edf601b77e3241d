import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.schedule import Schedule, ScheduleTemplate
from app.models.workout import WorkoutTemplate
from app.repositories.schedule_template import ScheduleTemplateRepository
from app.repositories.workout_template import WorkoutTemplateRepository
from app.schemas.schedule import ScheduleItemCreate, ScheduleItemDefinition
from app.schemas.template import (GeneratedScheduleTemplate,
                                  GeneratedTemplateMetadata, GenerationCriteria,
                                  MuscleTarget, ScheduleTemplateUpdate,
                                  TemplateExerciseCandidate,
                                  WorkoutTemplateCandidate)
from app.services.preferences import PreferencesService
from app.services.schedule import NON_PERSISTED_FIELDS, ScheduleService
from app.services.template_generator import (MAX_TEMPLATES_PER_REQUEST,
                                             ScheduleTemplateGenerator,
                                             normalize_generation_criteria)
from app.utils.constant import CARDIO_FOCUS_KEYWORDS
from app.utils.dates import DateLike
from app.utils.helper import clamp

logger = logging.getLogger(__name__)

DEFAULT_RECOMMENDED_COUNT = 3


def to_candidate(template: WorkoutTemplate) -> WorkoutTemplateCandidate:
    """
    Flatten a stored workout template and its exercises into a generator candidate.
    """
    exercises = []
    for entry in template.exercises:
        exercise = entry.exercise
        exercises.append(TemplateExerciseCandidate(
            name=exercise.name,
            description=exercise.description,
            instructions=exercise.instructions,
            target_sets=entry.target_sets,
            target_reps=entry.target_reps,
            rest_seconds=entry.rest_seconds,
            muscles=[MuscleTarget(**muscle) for muscle in exercise.muscles or []],
            equipment=list(exercise.equipment or []),
        ))

    return WorkoutTemplateCandidate(
        id=str(template.id),
        name=template.name,
        description=template.description,
        category=template.category,
        difficulty=template.difficulty,
        estimated_duration=template.estimated_duration,
        exercises=exercises,
    )


def _clean_strings(values: Optional[List[Any]]) -> List[str]:
    return [value.strip() for value in values or [] if isinstance(value, str) and value.strip()]


def _stored_items(items: List[Any]) -> List[Dict[str, Any]]:
    return [item.model_dump(mode="json", exclude=NON_PERSISTED_FIELDS) for item in items]


def to_generated_template(template: ScheduleTemplate) -> GeneratedScheduleTemplate:
    """
    Present a saved template in the same shape as a freshly generated one.
    """
    items = sorted(
        (ScheduleItemDefinition.model_validate(item) for item in template.items or []),
        key=lambda item: (item.day, item.start_time),
    )
    tags = list(dict.fromkeys(item.category for item in items if item.category))

    return GeneratedScheduleTemplate(
        id=template.id,
        name=template.name,
        description=template.description,
        items=items,
        is_default=bool(template.is_default),
        is_public=bool(template.is_public),
        usage_count=template.usage_count or 0,
        metadata=GeneratedTemplateMetadata(
            source="default" if template.is_default else "recommended",
            generated_at=template.created_at,
            tags=tags,
        ),
    )


class TemplateService:
    """
    Service for generating, saving and applying schedule templates for a user.
    """

    def __init__(self, db: Session, generator: Optional[ScheduleTemplateGenerator] = None):
        self.db = db
        self.preferences_service = PreferencesService(db)
        self.schedule_service = ScheduleService(db)
        self.workout_template_repo = WorkoutTemplateRepository(db)
        self.schedule_template_repo = ScheduleTemplateRepository(db)
        self.generator = generator or ScheduleTemplateGenerator()

    def resolve_criteria(self, user_id: int, overrides: Dict[str, Any]) -> GenerationCriteria:
        """
        Merge request values over the user's stored preferences.

        Request values win only when present and non-empty. When the user never
        set ``include_cardio`` it is inferred from cardio-like focus areas.

        Args:
            user_id: The user ID
            overrides: Request criteria (unset fields omitted or None)

        Returns:
            Normalized generation criteria
        """
        preferences = self.preferences_service.get_preferences_by_user_id(user_id)

        defaults: Dict[str, Any] = {}
        if preferences:
            focus_areas = _clean_strings(preferences.focus_areas)
            include_cardio = preferences.include_cardio
            if include_cardio is None:
                include_cardio = any(
                    keyword in area.lower() for area in focus_areas for keyword in CARDIO_FOCUS_KEYWORDS
                )
            defaults = {
                "days_per_week": preferences.days_per_week,
                "preferred_days": preferences.preferred_days or None,
                "difficulty": preferences.difficulty,
                "focus": focus_areas,
                "preferred_start_time": preferences.preferred_time,
                "repeat_interval_weeks": preferences.repeat_interval_weeks,
                "timezone": preferences.timezone,
                "allowed_equipment": _clean_strings(preferences.available_equipment),
                "include_cardio": include_cardio,
            }

        merged = dict(defaults)
        for field, value in overrides.items():
            if value is None:
                continue
            if isinstance(value, (list, str)) and len(value) == 0:
                continue
            merged[field] = value

        return normalize_generation_criteria(merged)

    def generate_for_user(self, user_id: int, overrides: Dict[str, Any], count: Optional[int] = None) -> Dict[str, Any]:
        """
        Generate schedule templates from the workout templates a user can access.

        Args:
            user_id: The user ID
            overrides: Request criteria
            count: Requested number of templates, clamped to the configured maximum

        Returns:
            Dictionary with the templates, the criteria used, and the categories,
            difficulties and equipment available across eligible templates
        """
        criteria = self.resolve_criteria(user_id, overrides)
        eligible = [
            to_candidate(template)
            for template in self.workout_template_repo.get_eligible_for_user(
                user_id, limit=settings.MAX_TEMPLATE_CANDIDATES
            )
        ]

        def matches(candidate: WorkoutTemplateCandidate) -> bool:
            if criteria.difficulty and (candidate.difficulty or "").lower() != criteria.difficulty.lower():
                return False
            if criteria.focus:
                category = (candidate.category or "").lower()
                return any(category == focus.lower() for focus in criteria.focus)
            return True

        primary_pool = [candidate for candidate in eligible if matches(candidate)] or eligible
        requested = clamp(count or 1, 1, settings.MAX_GENERATED_TEMPLATES)

        templates = self.generator.generate(primary_pool, criteria, requested, eligible)
        logger.info(
            "User %s: generated %s template(s) from %s eligible workout templates",
            user_id, len(templates), len(eligible),
        )

        equipment: Dict[str, None] = {}
        for candidate in eligible:
            for exercise in candidate.exercises:
                for name in exercise.equipment:
                    if name:
                        equipment[name] = None

        return {
            "templates": templates,
            "criteria": criteria,
            "available_categories": list(dict.fromkeys(c.category for c in eligible if c.category)),
            "available_difficulties": list(dict.fromkeys(c.difficulty for c in eligible if c.difficulty)),
            "available_equipment": list(equipment),
        }

    def recommend(self, user_id: int, count: Optional[int] = None) -> List[GeneratedScheduleTemplate]:
        """
        Recommend templates: shared defaults first, topped up with generated ones.

        Generated templates use the user's stored preferences only and are
        tagged with the "recommended" source.

        Args:
            user_id: The user ID
            count: Number of templates wanted, clamped to 1-6 (default 3)

        Returns:
            Up to ``count`` templates
        """
        desired = clamp(DEFAULT_RECOMMENDED_COUNT if count is None else count, 1, MAX_TEMPLATES_PER_REQUEST)
        shared = [to_generated_template(template) for template in self.schedule_template_repo.get_shared(desired)]
        if len(shared) >= desired:
            return shared

        criteria = self.resolve_criteria(user_id, {})
        eligible = [
            to_candidate(template)
            for template in self.workout_template_repo.get_eligible_for_user(
                user_id, limit=settings.MAX_TEMPLATE_CANDIDATES
            )
        ]
        generated = self.generator.generate(eligible, criteria, desired - len(shared), eligible)
        recommended = [
            template.model_copy(update={"metadata": template.metadata.model_copy(update={"source": "recommended"})})
            for template in generated
        ]

        logger.info(
            "User %s: recommending %s shared and %s generated template(s)",
            user_id, len(shared), len(recommended),
        )
        return shared + recommended

    def list_templates(self, user_id: int) -> List[ScheduleTemplate]:
        return self.schedule_template_repo.get_by_user_id(user_id)

    def get_template(self, user_id: int, template_id: str) -> Optional[ScheduleTemplate]:
        """Return a template the user owns, or a default or public one."""
        return self.schedule_template_repo.get_accessible(template_id, user_id)

    def update_template(
        self,
        user_id: int,
        template_id: str,
        update_in: ScheduleTemplateUpdate,
    ) -> Optional[ScheduleTemplate]:
        """
        Update a template the user owns.

        A blank name keeps the stored one; ``items``, when given, replace the stored items.

        Returns:
            The updated template, or None when the user does not own it
        """
        template = self.schedule_template_repo.get_for_user(template_id, user_id)
        if not template:
            return None

        values: Dict[str, Any] = {}
        if update_in.name:
            values["name"] = update_in.name
        if "description" in update_in.model_fields_set:
            values["description"] = update_in.description
        if update_in.is_public is not None:
            values["is_public"] = update_in.is_public
        if update_in.items is not None:
            values["items"] = _stored_items(update_in.items)

        if not values:
            return template
        return self.schedule_template_repo.update(template, values)

    def save_template(self, user_id: int, template: GeneratedScheduleTemplate) -> ScheduleTemplate:
        """
        Persist a generated template so it can be applied to weeks later.
        """
        metadata = template.metadata.model_dump(mode="json") if template.metadata else None
        existing = self.schedule_template_repo.get_by_id(template.id)
        if existing and existing.user_id != user_id:
            raise ValueError(f"Template id {template.id} is already taken")

        values = {
            "id": template.id,
            "user_id": user_id,
            "name": template.name,
            "description": template.description,
            "items": _stored_items(template.items),
            "template_metadata": metadata,
            "is_default": template.is_default,
            "is_public": template.is_public,
        }
        if existing:
            return self.schedule_template_repo.update(existing, values)
        return self.schedule_template_repo.create(values)

    def delete_template(self, user_id: int, template_id: str) -> bool:
        template = self.schedule_template_repo.get_for_user(template_id, user_id)
        if not template:
            return False
        self.schedule_template_repo.delete(template)
        return True

    def apply_template(self, user_id: int, template_id: str, week_start: DateLike) -> Optional[Schedule]:
        """
        Add a saved template's items to a week and bump the template's usage count.

        Args:
            user_id: The user ID
            template_id: A template the user owns, or a default or public one
            week_start: Any date inside the target week

        Returns:
            The updated schedule, or None when the template does not exist
        """
        template = self.schedule_template_repo.get_accessible(template_id, user_id)
        if not template:
            return None

        items = [ScheduleItemCreate.model_validate(item).model_dump() for item in template.items or []]
        schedule = self.schedule_service.add_items(user_id, week_start, items)
        self.schedule_template_repo.update(template, {"usage_count": (template.usage_count or 0) + 1})
        logger.info("Applied template %s to schedule %s", template_id, schedule.id)
        return schedule

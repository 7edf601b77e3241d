import logging
import random
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from app.schemas.schedule import ScheduleItemDefinition
from app.schemas.template import (GeneratedScheduleTemplate,
                                  GeneratedTemplateMetadata,
                                  GenerationCriteria,
                                  WorkoutTemplateCandidate)
from app.utils.constant import (CARDIO_EXERCISE_KEYWORDS,
                                CARDIO_MUSCLE_KEYWORDS, CARDIO_NAME_KEYWORDS,
                                CARDIO_TEMPLATE_KEYWORDS,
                                DEFAULT_DAYS_SEQUENCE, UNRESTRICTED_EQUIPMENT,
                                WEEKDAY_LABELS)
from app.utils.helper import (DEFAULT_START_TIME, add_minutes_to_time,
                              capitalize, capitalize_words, clamp,
                              normalize_time, safe_int_convert)

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_DURATION = 60
MAX_TEMPLATES_PER_REQUEST = 6


def sanitize_equipment_name(value: Optional[str]) -> str:
    if not value:
        return ""
    return value.strip().lower()


def required_equipment(template: WorkoutTemplateCandidate) -> List[str]:
    """
    Distinct, normalized equipment names used by any exercise in the template.
    """
    equipment: Dict[str, None] = {}
    for exercise in template.exercises:
        for name in exercise.equipment:
            cleaned = sanitize_equipment_name(name)
            if cleaned:
                equipment[cleaned] = None
    return list(equipment)


def matches_equipment(template: WorkoutTemplateCandidate, allowed_equipment: Set[str]) -> bool:
    """
    Check that everything a template needs is in ``allowed_equipment``.

    An empty allowed set means the user did not restrict equipment.
    Bodyweight work always passes.
    """
    if not allowed_equipment:
        return True

    return all(
        required in UNRESTRICTED_EQUIPMENT or required in allowed_equipment
        for required in required_equipment(template)
    )


def _contains_any(text: Optional[str], keywords: List[str]) -> bool:
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in keywords)


def is_cardio_template(template: WorkoutTemplateCandidate) -> bool:
    """
    Heuristic cardio classification by category, template name, exercise names and muscles.
    """
    if _contains_any(template.category, CARDIO_TEMPLATE_KEYWORDS):
        return True
    if _contains_any(template.name, CARDIO_NAME_KEYWORDS):
        return True

    for exercise in template.exercises:
        if _contains_any(exercise.name, CARDIO_EXERCISE_KEYWORDS):
            return True
        if any(_contains_any(muscle.name, CARDIO_MUSCLE_KEYWORDS) for muscle in exercise.muscles):
            return True
    return False


def coerce_days(days: Optional[Iterable[Any]], count: int) -> List[int]:
    """
    Clean a preferred-days list and pad or truncate it to ``count`` weekdays.

    Padding draws from the default Mon/Wed/Fri/Sun/Tue/Thu/Sat priority order.
    """
    cleaned: List[int] = []
    for value in days or []:
        day = safe_int_convert(value, default=-1)
        if 0 <= day <= 6:
            cleaned.append(day)

    if len(cleaned) >= count:
        return cleaned[:count]

    fallback = [day for day in DEFAULT_DAYS_SEQUENCE if day not in cleaned]
    return (cleaned + fallback)[:count]


def normalize_generation_criteria(raw: Mapping[str, Any]) -> GenerationCriteria:
    """
    Build a fully populated GenerationCriteria from loosely typed input.

    Args:
        raw: Partial criteria, e.g. merged request body and stored preferences

    Returns:
        Criteria with every field clamped or defaulted
    """
    raw_days = raw.get("days_per_week")
    days_per_week = clamp(safe_int_convert(3 if raw_days is None else raw_days, default=3), 1, 7)
    repeat_interval = safe_int_convert(raw.get("repeat_interval_weeks"), default=1)

    allowed_equipment: Dict[str, None] = {}
    for name in raw.get("allowed_equipment") or []:
        cleaned = sanitize_equipment_name(name) if isinstance(name, str) else ""
        if cleaned:
            allowed_equipment[cleaned] = None

    focus = [value for value in raw.get("focus") or [] if isinstance(value, str) and value.strip()]

    return GenerationCriteria(
        days_per_week=days_per_week,
        preferred_days=coerce_days(raw.get("preferred_days"), days_per_week),
        difficulty=raw.get("difficulty") or None,
        focus=focus,
        preferred_start_time=normalize_time(raw.get("preferred_start_time")),
        repeat_interval_weeks=repeat_interval if repeat_interval > 0 else 1,
        timezone=raw.get("timezone") or None,
        allow_back_to_back=bool(raw.get("allow_back_to_back", False)),
        include_cardio=bool(raw.get("include_cardio", False)),
        allowed_equipment=list(allowed_equipment),
    )


def build_generator_data(template: WorkoutTemplateCandidate) -> Dict[str, Any]:
    """
    Denormalized snapshot of a template so a schedule item can be shown without re-querying.
    """
    return {
        "name": template.name,
        "duration": DEFAULT_TEMPLATE_DURATION if template.estimated_duration is None else template.estimated_duration,
        "difficulty": template.difficulty or "Mixed",
        "exercises": [
            {
                "name": exercise.name,
                "sets": exercise.target_sets,
                "reps": exercise.target_reps,
                "rest": f"{exercise.rest_seconds}s" if exercise.rest_seconds is not None else None,
                "instructions": exercise.description or exercise.instructions or "",
                "target_muscles": [muscle.name for muscle in exercise.muscles],
                "equipment": list(exercise.equipment),
            }
            for exercise in template.exercises
        ],
        "warmup": [],
        "cooldown": [],
    }


def build_item_description(template: WorkoutTemplateCandidate) -> str:
    primary_muscles: Dict[str, None] = {}
    for exercise in template.exercises:
        for muscle in exercise.muscles:
            if muscle.is_primary:
                primary_muscles[muscle.name] = None

    description = f"{len(template.exercises)} exercises"
    muscles = list(primary_muscles)[:3]
    if muscles:
        description += f" • {', '.join(muscles)}"
    if template.difficulty:
        description += f" • {template.difficulty}"
    return description


def _unique(values: Iterable[Optional[str]]) -> List[str]:
    return list(dict.fromkeys(value for value in values if value))


class ScheduleTemplateGenerator:
    """
    Assigns workout templates to weekdays and packages the result as recurring
    schedule templates.

    Randomness only provides variety between generated plans; pass a seeded
    ``random.Random`` for reproducible output.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def generate(
        self,
        pool: List[WorkoutTemplateCandidate],
        criteria: GenerationCriteria,
        count: int = 1,
        backup_pool: Optional[List[WorkoutTemplateCandidate]] = None,
    ) -> List[GeneratedScheduleTemplate]:
        """
        Generate schedule templates from a pool of workout templates.

        Args:
            pool: Preferred candidates (already narrowed by difficulty/focus)
            criteria: Normalized generation criteria
            count: Number of templates to build, clamped to 1-6
            backup_pool: Candidates used to refill the pool when it runs out (defaults to ``pool``)

        Returns:
            The generated templates; empty when both pools are empty
        """
        if backup_pool is None:
            backup_pool = list(pool)
        if not pool and not backup_pool:
            return []

        allowed = {sanitize_equipment_name(name) for name in criteria.allowed_equipment}
        allowed.discard("")

        filtered_primary = [template for template in pool if matches_equipment(template, allowed)]
        filtered_backup = [template for template in backup_pool if matches_equipment(template, allowed)]

        # Equipment is a soft constraint
        primary = filtered_primary or list(pool)
        backup = filtered_backup or list(backup_pool)

        cardio_primary = [t for t in primary if is_cardio_template(t) and matches_equipment(t, allowed)]
        cardio_backup = [t for t in backup if is_cardio_template(t) and matches_equipment(t, allowed)]

        templates: List[GeneratedScheduleTemplate] = []
        for iteration in range(clamp(count, 1, MAX_TEMPLATES_PER_REQUEST)):
            assignments = self._assign_days(criteria, primary, backup, cardio_primary, cardio_backup)
            if not assignments:
                continue
            templates.append(self._build_template(criteria, assignments, iteration, allowed))

        logger.info(
            "Generated %s schedule template(s) from %s primary and %s backup candidates",
            len(templates), len(primary), len(backup),
        )
        return templates

    def _shuffled(self, templates: List[WorkoutTemplateCandidate]) -> List[WorkoutTemplateCandidate]:
        shuffled = list(templates)
        self.rng.shuffle(shuffled)
        return shuffled

    def _assign_days(
        self,
        criteria: GenerationCriteria,
        primary: List[WorkoutTemplateCandidate],
        backup: List[WorkoutTemplateCandidate],
        cardio_primary: List[WorkoutTemplateCandidate],
        cardio_backup: List[WorkoutTemplateCandidate],
    ) -> List[tuple]:
        available = self._shuffled(primary)
        cardio_pool = self._shuffled(cardio_primary)

        day_sequence = list(criteria.preferred_days or DEFAULT_DAYS_SEQUENCE)[:criteria.days_per_week]
        cardio_needed = 0
        if criteria.include_cardio:
            cardio_needed = min(len(day_sequence), max(1, round(criteria.days_per_week / 3)))
        cardio_assigned = 0

        def take_cardio() -> Optional[WorkoutTemplateCandidate]:
            nonlocal cardio_pool
            if not cardio_pool and cardio_backup:
                cardio_pool = self._shuffled(cardio_backup)
            return cardio_pool.pop(0) if cardio_pool else None

        def take_available() -> Optional[WorkoutTemplateCandidate]:
            nonlocal available
            if not available:
                available = self._shuffled(backup)
            return available.pop(0) if available else None

        assignments: List[tuple] = []
        for day in day_sequence:
            workout = None

            if cardio_assigned < cardio_needed:
                workout = take_cardio()
                if workout is not None:
                    cardio_assigned += 1
                    picked_id = workout.id
                    available = [t for t in available if t.id != picked_id]

            if workout is None:
                workout = take_available()
            if workout is None:
                continue

            previous = assignments[-1][1] if assignments else None
            if not criteria.allow_back_to_back and previous is not None and previous.id == workout.id:
                # Best effort: one swap attempt, keep the repeat if nothing else is left
                alternative = take_available()
                if alternative is not None and alternative.id != workout.id:
                    alt_id = alternative.id
                    available = [t for t in available if t.id != alt_id]
                    available.append(workout)
                    available = self._shuffled(available)
                    workout = alternative
                elif alternative is not None:
                    available.append(alternative)

            assignments.append((day, workout))

        return assignments

    def _build_item(
        self,
        template: WorkoutTemplateCandidate,
        day: int,
        criteria: GenerationCriteria,
    ) -> ScheduleItemDefinition:
        start_time = criteria.preferred_start_time or DEFAULT_START_TIME
        duration = DEFAULT_TEMPLATE_DURATION if template.estimated_duration is None else template.estimated_duration
        interval = criteria.repeat_interval_weeks if criteria.repeat_interval_weeks > 0 else 1

        return ScheduleItemDefinition(
            type="workout",
            title=template.name,
            description=template.description or build_item_description(template),
            day=day,
            start_time=start_time,
            end_time=add_minutes_to_time(start_time, duration),
            category=template.category,
            difficulty=template.difficulty,
            duration=duration,
            is_from_generator=True,
            generator_data=build_generator_data(template),
            is_recurring=True,
            repeat_pattern="weekly",
            repeat_interval=interval,
            repeat_ends_on=None,
            repeat_days_of_week=[day],
            recurrence_rule={
                "frequency": "weekly",
                "interval": interval,
                "days_of_week": [day],
                "meta": {"source": "auto-generator"},
            },
        )

    def _build_template(
        self,
        criteria: GenerationCriteria,
        assignments: List[tuple],
        iteration: int,
        allowed: Set[str],
    ) -> GeneratedScheduleTemplate:
        days = [day for day, _ in assignments]
        workouts = [workout for _, workout in assignments]
        categories = _unique(workout.category for workout in workouts)

        tags = _unique(
            ([criteria.difficulty] if criteria.difficulty else [])
            + categories
            + (["cardio"] if criteria.include_cardio else [])
        )

        return GeneratedScheduleTemplate(
            id=f"generated-{uuid.uuid4().hex}",
            name=self._template_name(criteria, iteration, categories),
            description=self._template_description(criteria, days, categories),
            items=[self._build_item(workout, day, criteria) for day, workout in assignments],
            metadata=GeneratedTemplateMetadata(
                source="generated",
                generated_at=datetime.now(timezone.utc),
                criteria=criteria,
                tags=tags,
                insights=self._insights(workouts, days),
                allowed_equipment=sorted(allowed) if allowed else list(criteria.allowed_equipment),
            ),
        )

    def _template_name(self, criteria: GenerationCriteria, iteration: int, categories: List[str]) -> str:
        difficulty = criteria.difficulty or "balanced"
        difficulty_label = "Balanced" if difficulty == "mixed" else capitalize(difficulty)
        category_label = " • ".join(categories) if categories else "mixed focus"
        return f"{difficulty_label} {criteria.days_per_week}-Day {capitalize_words(category_label)} Plan #{iteration + 1}"

    def _template_description(self, criteria: GenerationCriteria, days: List[int], categories: List[str]) -> str:
        day_names = ", ".join(WEEKDAY_LABELS[day] for day in days)
        focus = ", ".join(categories) if categories else "mixed focus"
        if criteria.repeat_interval_weeks > 1:
            cadence = f"Repeats every {criteria.repeat_interval_weeks} weeks"
        else:
            cadence = "Repeats weekly"
        return f"{criteria.days_per_week} workouts on {day_names}. Focus: {focus}. {cadence}."

    def _insights(self, workouts: List[WorkoutTemplateCandidate], days: List[int]) -> List[str]:
        categories = _unique(workout.category for workout in workouts)
        difficulties = _unique(workout.difficulty for workout in workouts)
        return [
            f"Focus areas: {', '.join(categories)}" if categories else "Balanced focus",
            f"Difficulty mix: {', '.join(difficulties)}" if difficulties else "Varied difficulty",
            f"Training days: {', '.join(WEEKDAY_LABELS[day] for day in days)}",
        ]

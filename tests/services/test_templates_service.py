import random
from datetime import date

import pytest

from app.models.schedule import ScheduleTemplate
from app.models.user import User
from app.repositories.workout_template import WorkoutTemplateRepository
from app.schemas.schedule import ScheduleItemCreate
from app.schemas.template import GeneratedScheduleTemplate, ScheduleTemplateUpdate
from app.services.preferences import PreferencesService
from app.services.schedule import ScheduleService
from app.services.template_generator import ScheduleTemplateGenerator
from app.services.templates import TemplateService, to_candidate


def exercise_entry(name, equipment=None, muscles=None):
    return {
        "exercise": {
            "name": name,
            "description": f"{name} with control",
            "muscles": muscles or [{"name": "quads", "is_primary": True}],
            "equipment": equipment or [],
        },
        "target_sets": 3,
        "target_reps": "10",
        "rest_seconds": 60,
    }


def add_saved_template(db, template_id, user_id=None, is_default=False, is_public=False, usage_count=0):
    template = ScheduleTemplate(
        id=template_id,
        user_id=user_id,
        name=f"Plan {template_id}",
        items=[
            {"title": "Core", "day": 4, "start_time": "07:00", "end_time": "07:30", "category": "core"},
            {"title": "Run", "day": 1, "start_time": "06:00", "end_time": "06:45", "category": "cardio"},
        ],
        is_default=is_default,
        is_public=is_public,
        usage_count=usage_count,
    )
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


@pytest.fixture
def other_user(db):
    other = User(email="other@example.com", is_active=True)
    db.add(other)
    db.commit()
    db.refresh(other)
    return other


@pytest.fixture
def workout_templates(db, user, other_user):
    repo = WorkoutTemplateRepository(db)
    return [
        repo.create_with_exercises(
            {"user_id": user.id, "name": "Leg Day", "category": "strength", "difficulty": "intermediate", "estimated_duration": 50},
            [exercise_entry("Back Squat", ["barbell"]), exercise_entry("Lunge")],
        ),
        repo.create_with_exercises(
            {"name": "Tempo Run", "category": "cardio", "difficulty": "beginner", "is_predefined": True, "estimated_duration": 30},
            [exercise_entry("Treadmill Run", muscles=[{"name": "cardiovascular system", "is_primary": True}])],
        ),
        repo.create_with_exercises(
            {"user_id": other_user.id, "name": "Private Session", "category": "mobility", "difficulty": "beginner"},
            [exercise_entry("Hip Opener")],
        ),
    ]


@pytest.fixture
def service(db):
    return TemplateService(db, generator=ScheduleTemplateGenerator(rng=random.Random(3)))


def test_to_candidate_flattens_exercises(workout_templates):
    """Test conversion of a stored workout template to a candidate"""
    candidate = to_candidate(workout_templates[0])

    assert candidate.id == str(workout_templates[0].id)
    assert [exercise.name for exercise in candidate.exercises] == ["Back Squat", "Lunge"]
    assert candidate.exercises[0].equipment == ["barbell"]
    assert candidate.exercises[0].muscles[0].is_primary is True
    assert candidate.exercises[0].rest_seconds == 60


def test_resolve_criteria_without_preferences(service, user):
    """Test criteria for a user without stored preferences"""
    criteria = service.resolve_criteria(user.id, {"days_per_week": 5})

    assert criteria.days_per_week == 5
    assert criteria.preferred_days == [1, 3, 5, 0, 2]
    assert criteria.include_cardio is False


def test_resolve_criteria_falls_back_to_preferences(db, service, user):
    """Test that empty request values fall back to stored preferences"""
    PreferencesService(db).upsert_preferences(user.id, {
        "days_per_week": 2,
        "preferred_days": [2, 4],
        "preferred_time": "6:30",
        "focus_areas": ["Endurance"],
        "available_equipment": ["Dumbbell", " "],
        "timezone": "Europe/Paris",
    })

    criteria = service.resolve_criteria(user.id, {"preferred_days": [], "difficulty": "", "days_per_week": None})

    assert criteria.days_per_week == 2
    assert criteria.preferred_days == [2, 4]
    assert criteria.preferred_start_time == "06:30"
    assert criteria.focus == ["Endurance"]
    assert criteria.include_cardio is True
    assert criteria.allowed_equipment == ["dumbbell"]
    assert criteria.timezone == "Europe/Paris"


def test_request_values_override_preferences(db, service, user):
    """Test that request values win over stored preferences"""
    PreferencesService(db).upsert_preferences(user.id, {
        "days_per_week": 2,
        "preferred_days": [2, 4],
        "include_cardio": True,
    })

    criteria = service.resolve_criteria(user.id, {"days_per_week": 3, "include_cardio": False})

    assert criteria.days_per_week == 3
    assert criteria.preferred_days == [2, 4, 1]
    assert criteria.include_cardio is False


def test_generate_for_user_uses_eligible_templates_only(service, user, workout_templates):
    """Test that generation only uses the user's own, predefined and public templates"""
    result = service.generate_for_user(user.id, {"days_per_week": 3}, count=10)

    assert len(result["templates"]) == 4
    for template in result["templates"]:
        assert len(template.items) == 3
        assert {item.title for item in template.items} <= {"Leg Day", "Tempo Run"}
    assert set(result["available_categories"]) == {"strength", "cardio"}
    assert set(result["available_difficulties"]) == {"intermediate", "beginner"}
    assert result["available_equipment"] == ["barbell"]
    assert result["criteria"].days_per_week == 3


def test_generate_for_user_without_templates(service, user):
    """Test generation when no workout templates exist"""
    result = service.generate_for_user(user.id, {})

    assert result["templates"] == []
    assert result["available_categories"] == []


def test_saved_template_applies_as_recurring_week(db, service, user, workout_templates):
    """Test that an applied template repeats into later weeks"""
    generated = service.generate_for_user(user.id, {"days_per_week": 3}, count=1)["templates"][0]

    saved = service.save_template(user.id, generated)
    assert saved.id == generated.id
    assert [template.id for template in service.list_templates(user.id)] == [generated.id]

    schedule = service.apply_template(user.id, saved.id, date(2024, 1, 9))
    assert schedule.week_start == date(2024, 1, 7)
    assert len(schedule.items) == 3
    db.refresh(saved)
    assert saved.usage_count == 1

    _, next_week = ScheduleService(db).get_week(user.id, date(2024, 1, 14))
    assert len(next_week) == 3
    assert all(item.is_virtual for item in next_week)
    assert sorted(item.day for item in next_week) == [1, 3, 5]


def test_save_template_updates_existing(service, user, workout_templates):
    """Test that saving an existing id updates it"""
    generated = service.generate_for_user(user.id, {"days_per_week": 2})["templates"][0]
    service.save_template(user.id, generated)

    renamed = generated.model_copy(update={"name": "My Plan"})
    saved = service.save_template(user.id, renamed)

    assert saved.name == "My Plan"
    assert len(service.list_templates(user.id)) == 1


def test_save_template_rejects_foreign_id(service, user, other_user):
    """Test that another user's template id cannot be overwritten"""
    template = GeneratedScheduleTemplate(id="shared-id", name="Mine")
    service.save_template(other_user.id, template)

    with pytest.raises(ValueError):
        service.save_template(user.id, template)


def test_delete_and_apply_missing_template(service, user):
    """Test delete and apply on a removed template"""
    template = GeneratedScheduleTemplate(id="plan-1", name="Plan")
    service.save_template(user.id, template)

    assert service.delete_template(user.id, "plan-1") is True
    assert service.delete_template(user.id, "plan-1") is False
    assert service.apply_template(user.id, "plan-1", date(2024, 1, 7)) is None


def test_recommend_returns_shared_templates_when_enough(db, service, user, other_user, workout_templates):
    """Test that default and public templates are recommended first"""
    add_saved_template(db, "popular", user_id=other_user.id, is_public=True, usage_count=5)
    add_saved_template(db, "quiet", user_id=other_user.id, is_public=True, usage_count=1)
    add_saved_template(db, "builtin", is_default=True)
    add_saved_template(db, "private", user_id=other_user.id, usage_count=50)

    templates = service.recommend(user.id, 2)

    assert [template.id for template in templates] == ["builtin", "popular"]
    assert [template.metadata.source for template in templates] == ["default", "recommended"]
    assert [item.day for item in templates[0].items] == [1, 4]
    assert templates[0].metadata.tags == ["cardio", "core"]


def test_recommend_tops_up_with_generated_templates(db, service, user, workout_templates):
    """Test that missing recommendations are generated from preferences"""
    add_saved_template(db, "builtin", is_default=True)
    PreferencesService(db).upsert_preferences(user.id, {"days_per_week": 2, "preferred_days": [2, 5]})

    templates = service.recommend(user.id)

    assert len(templates) == 3
    assert templates[0].id == "builtin"
    for template in templates[1:]:
        assert template.id.startswith("generated-")
        assert template.metadata.source == "recommended"
        assert template.metadata.criteria.days_per_week == 2
        assert [item.day for item in template.items] == [2, 5]


def test_recommend_clamps_count(service, user, workout_templates):
    """Test that the recommendation count stays within bounds"""
    assert len(service.recommend(user.id, 0)) == 1
    assert len(service.recommend(user.id, 10)) == 6


def test_recommend_without_any_source(service, user):
    """Test recommendations with nothing to offer"""
    assert service.recommend(user.id) == []


def test_get_template_allows_own_default_and_public(db, service, user, other_user):
    """Test which saved templates a user can read"""
    add_saved_template(db, "mine", user_id=user.id)
    add_saved_template(db, "shared", user_id=other_user.id, is_public=True)
    add_saved_template(db, "builtin", is_default=True)
    add_saved_template(db, "theirs", user_id=other_user.id)

    assert service.get_template(user.id, "mine").id == "mine"
    assert service.get_template(user.id, "shared").id == "shared"
    assert service.get_template(user.id, "builtin").id == "builtin"
    assert service.get_template(user.id, "theirs") is None


def test_update_template_changes_given_fields(db, service, user):
    """Test a partial template update"""
    add_saved_template(db, "mine", user_id=user.id)

    updated = service.update_template(user.id, "mine", ScheduleTemplateUpdate(
        name="",
        is_public=True,
        items=[ScheduleItemCreate(title="Swim", day=3, start_time="12:00", end_time="12:45")],
    ))

    assert updated.name == "Plan mine"
    assert updated.is_public is True
    assert [item["title"] for item in updated.items] == ["Swim"]
    assert "id" not in updated.items[0]


def test_update_template_requires_ownership(db, service, user, other_user):
    """Test that only the owner can update a template"""
    add_saved_template(db, "shared", user_id=other_user.id, is_public=True)

    assert service.update_template(user.id, "shared", ScheduleTemplateUpdate(name="Mine now")) is None


def test_apply_public_template_of_another_user(db, service, user, other_user):
    """Test applying a public template owned by someone else"""
    template = add_saved_template(db, "shared", user_id=other_user.id, is_public=True)

    schedule = service.apply_template(user.id, "shared", date(2024, 1, 7))

    assert schedule.user_id == user.id
    assert sorted(item.title for item in schedule.items) == ["Core", "Run"]
    db.refresh(template)
    assert template.usage_count == 1

from fastapi import APIRouter
from app.api.endpoints import schedule, schedule_templates, preferences, workout_templates, health

router = APIRouter()

# Template routes first so "/schedule/templates" is not shadowed by "/schedule" handlers
router.include_router(schedule_templates.router, prefix="/schedule/templates", tags=["schedule-templates"])
router.include_router(schedule.router, prefix="/schedule", tags=["schedule"])
router.include_router(preferences.router, prefix="/preferences", tags=["preferences"])
router.include_router(workout_templates.router, prefix="/workout-templates", tags=["workout-templates"])
router.include_router(health.router, prefix="/health", tags=["health"])

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter()
@router.get("/", status_code=200)
def health_check():
    return {"status": "ok", "service": settings.PROJECT_NAME, "version": settings.VERSION}

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.endpoints import router as api_router
from app.core.config import settings
from app.db.session import Base, engine

# Register models on the metadata before create_all
from app.models import preferences, schedule, user, workout  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    # Migrations are managed outside this service; this only creates missing tables
    Base.metadata.create_all(bind=engine)
    logger.info("%s %s started", settings.PROJECT_NAME, settings.VERSION)
    yield


def create_app() -> FastAPI:
    application = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)
    application.include_router(api_router, prefix=settings.API_V1_STR)
    return application


app = create_app()

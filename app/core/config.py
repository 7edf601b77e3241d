from pydantic_settings import BaseSettings
import os
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    PROJECT_NAME: str = "FitTrack"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str = os.getenv("SECRET_KEY", "development_secret_key")
    DATABASE_URI: str = os.getenv("DATABASE_URI", "sqlite:///./fittrack.db")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 8  # 8 days

    # Schedule template generation
    MAX_GENERATED_TEMPLATES: int = int(os.getenv("MAX_GENERATED_TEMPLATES", "4"))
    MAX_TEMPLATE_CANDIDATES: int = int(os.getenv("MAX_TEMPLATE_CANDIDATES", "128"))

    # Calendar range view
    CALENDAR_MAX_RANGE_DAYS: int = int(os.getenv("CALENDAR_MAX_RANGE_DAYS", "90"))


settings = Settings()

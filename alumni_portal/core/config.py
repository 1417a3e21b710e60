import json
from dotenv import find_dotenv, load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, validator
from typing import Optional, List
from datetime import timedelta

class Settings(BaseSettings):
    # Application Settings
    APP_NAME: str = "Alumni Portal Session Board"
    VERSION: str = "1.0.0"
    DEBUG: bool = Field(default=False, env="DEBUG")
    PRODUCTION: bool = Field(default=False, env="PRODUCTION")

    # Portal Backend Settings
    PORTAL_API_URL: str = Field(default="http://localhost:5000", env="PORTAL_API_URL")
    REQUEST_TIMEOUT_SECONDS: float = Field(default=10.0, env="REQUEST_TIMEOUT_SECONDS")

    # Session Policy Settings
    SESSION_DURATION_MINUTES: int = Field(default=120, env="SESSION_DURATION_MINUTES")
    FEEDBACK_MAX_LENGTH: int = Field(default=1000, env="FEEDBACK_MAX_LENGTH")

    # CORS Settings
    ALLOWED_ORIGINS: List[str] = Field(
        default=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
            "http://127.0.0.1:3000"
        ],
        env="ALLOWED_ORIGINS"
    )

    # Logging Settings
    LOG_LEVEL: str = Field(default="INFO", env="LOG_LEVEL")
    LOG_DIR: Optional[str] = Field(default=None, env="LOG_DIR")

    @validator('ALLOWED_ORIGINS', pre=True)
    def parse_allowed_origins(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",")]
        return v

    @validator('PORTAL_API_URL')
    def validate_portal_url(cls, v: str) -> str:
        if not v.startswith(('http://', 'https://')):
            v = f'http://{v}'
        return v.rstrip('/')

    @validator('SESSION_DURATION_MINUTES')
    def validate_session_duration(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Session duration must be a positive number of minutes")
        return v

    @validator('LOG_LEVEL')
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True
    )

def load_settings() -> Settings:
    """Settings from the environment, with a .env file in or above the working directory loaded first"""
    load_dotenv(find_dotenv(usecwd=True))
    return Settings()

# Initialize settings
settings = load_settings()

# Helper Functions
def get_session_duration(minutes: Optional[int] = None) -> timedelta:
    if minutes is None:
        minutes = settings.SESSION_DURATION_MINUTES
    return timedelta(minutes=minutes)

def is_production() -> bool:
    return settings.PRODUCTION

def get_portal_settings() -> dict:
    return {
        "base_url": settings.PORTAL_API_URL,
        "timeout": settings.REQUEST_TIMEOUT_SECONDS,
    }

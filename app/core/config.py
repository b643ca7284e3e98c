import logging
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import ClassVar, List

# Load environment variables from .env file
load_dotenv(".env")
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Class to store all the settings of the MOHR leave service.

    Built once at import time and frozen; services receive it through their
    constructor instead of reading the environment.
    """

    # ------------------------------
    # Environment
    # ------------------------------
    ENVIRONMENT: str = Field(default="development")
    SERVICE_NAME: str = Field(default="MOHR Leave Service")
    API_PREFIX: str = Field(default="/api/v1")
    LOG_LEVEL: str = Field(default="INFO")

    # ------------------------------
    # Database
    # ------------------------------
    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./mohr.db")
    SQL_ECHO: bool = Field(default=False)
    DB_POOL_SIZE: int = Field(default=15)
    DB_MAX_OVERFLOW: int = Field(default=5)
    SQLITE_BUSY_TIMEOUT_SECONDS: float = Field(default=15.0)

    # ------------------------------
    # Auth
    # ------------------------------
    SECRET_KEY: str = Field(default="mohr-secret-key-change-in-production")
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=24 * 60)

    # ------------------------------
    # HTTP
    # ------------------------------
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"]
    )
    RATE_LIMIT_ENABLED: bool = Field(default=True)
    RATE_LIMIT: str = Field(default="100/15minutes")
    REQUEST_TIMEOUT_SECONDS: float = Field(default=30.0)

    # ------------------------------
    # Leave requests
    # ------------------------------
    RECENT_REQUESTS_WINDOW_DAYS: int = Field(default=30)
    ALLOW_DECISION_REOPEN: bool = Field(default=True)

    # ------------------------------
    # Database models
    # ------------------------------
    DB_MODELS: ClassVar[List[str]] = [
        "app.models.employee",
        "app.models.leave",
    ]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )


# Instantiate the settings
settings = Settings()

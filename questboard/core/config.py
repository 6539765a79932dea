"""
Application Configuration for Questboard
"""
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

# Get the project root directory (where .env file is located)
PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./questboard.db"
    DATABASE_ECHO: bool = False

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    # API Configuration
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Questboard API"
    DEBUG: bool = True

    # CORS Configuration
    ALLOWED_ORIGINS: str = "*"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from string"""
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Environment
    ENVIRONMENT: str = "development"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Anonymous/default actor: credited when a request or task carries no user.
    # 0 disables the fallback.
    DEFAULT_USER_ID: int = 1
    DEFAULT_USERNAME: str = "guest"
    SEED_DEFAULT_USER: bool = True

    # Leaderboard
    LEADERBOARD_DEFAULT_LIMIT: int = 10
    LEADERBOARD_MAX_LIMIT: int = 100

    # AI roadmap service (OpenAI-compatible chat completions endpoint)
    AI_API_URL: str = "https://api.openai.com/v1/chat/completions"
    AI_API_KEY: Optional[str] = None
    AI_MODEL: str = "gpt-4o"
    AI_TIMEOUT_SECONDS: float = 60.0

    # Reminders
    REMINDERS_ENABLED: bool = True

    @property
    def default_user_id(self) -> Optional[int]:
        return self.DEFAULT_USER_ID or None

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


# Global settings instance
settings = Settings()

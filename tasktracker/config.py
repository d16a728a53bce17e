"""Environment configuration for the Task Tracker application."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

# Used when JWT_SECRET is not set. Tokens signed with it are forgeable.
DEFAULT_JWT_SECRET = "your-default-secret"


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self) -> None:
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./tasktracker.db")
        self.JWT_SECRET: str = os.getenv("JWT_SECRET", "") or DEFAULT_JWT_SECRET
        self.JWT_ALGORITHM: str = "HS256"
        self.JWT_EXPIRATION_HOURS: int = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))
        self.BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "10"))
        self.DB_TIMEOUT_SECONDS: int = int(os.getenv("DB_TIMEOUT_SECONDS", "10"))
        self.PORT: int = int(os.getenv("PORT", "5000"))
        self.APP_ENV: str = os.getenv("APP_ENV", "development")
        self.STATIC_DIR: str = os.getenv("STATIC_DIR", "../frontend/dist")
        self.FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def uses_default_secret(self) -> bool:
        return self.JWT_SECRET == DEFAULT_JWT_SECRET

    def validate(self) -> None:
        """Validate settings that would otherwise fail late."""
        if not self.DATABASE_URL:
            raise ValueError("DATABASE_URL environment variable is required")
        if not 4 <= self.BCRYPT_ROUNDS <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        if self.DB_TIMEOUT_SECONDS <= 0:
            raise ValueError("DB_TIMEOUT_SECONDS must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()
    settings.validate()
    return settings

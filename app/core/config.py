"""Application configuration with environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (in-memory SQLite by default, lives as long as the process)
    DATABASE_URL: str = "sqlite://"

    # Application
    APP_NAME: str = "PDF Quiz Generator API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    # OpenAI (no default for the key: the app must not start without it)
    OPENAI_API_KEY: str
    OPENAI_MODEL: str = "gpt-4o-mini"  # or gpt-4o, gpt-4.1-mini
    OPENAI_TEMPERATURE: float = 0.7
    OPENAI_TIMEOUT_SECONDS: float = 60.0

    class Config:
        env_file = ".env"
        case_sensitive = True


# Create global settings instance
settings = Settings()

"""
SkillSwap – Application configuration.
Reads environment variables from a .env file via pydantic-settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── App ──
    APP_NAME: str = "SkillSwap"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ── Database ──
    DATABASE_URL: str = "sqlite+aiosqlite:///./skillswap.db"
    SEED_SKILL_CATALOG: bool = True

    # ── JWT (issued by the identity provider, verified here) ──
    SECRET_KEY: str = "change-me-to-a-random-secret"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # ── Notifications (SMTP) ──
    EMAIL_NOTIFICATIONS: bool = False
    SMTP_SERVER: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""

    # ── Swap policy ──
    NOTIFY_ON_CANCEL: bool = False
    SOFT_DELETE_ON_CANCEL: bool = False
    RATING_REQUIRES_COMPLETION: bool = False

    # ── Browse ──
    SEARCH_MAX_PAGE_SIZE: int = 100
    MATCHES_LIMIT: int = 20


settings = Settings()

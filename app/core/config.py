"""Application configuration"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # API Configuration
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Subscription API"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "User accounts and subscription billing backend"

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 10
    VERIFICATION_TOKEN_EXPIRE_HOURS: int = 24
    PASSWORD_RESET_TOKEN_EXPIRE_HOURS: int = 1

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300  # seconds
    DB_ECHO: bool = False

    # Redis / Celery
    REDIS_URL: str = "redis://localhost:6379"
    CELERY_TASK_ALWAYS_EAGER: bool = False

    # Stripe
    STRIPE_SECRET_KEY: str
    STRIPE_WEBHOOK_SECRET: str
    STRIPE_WEBHOOK_TOLERANCE: int = 300  # seconds
    STRIPE_PRICE_ID_PRO_MONTHLY: str = "price_pro_monthly"
    STRIPE_PRICE_ID_PRO_YEARLY: str = "price_pro_yearly"
    STRIPE_PRICE_ID_PREMIUM_MONTHLY: str = "price_premium_monthly"
    STRIPE_PRICE_ID_PREMIUM_YEARLY: str = "price_premium_yearly"

    # Email SMTP Configuration
    SMTP_HOST: Optional[str] = None  # delivery is skipped when unset
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_USE_TLS: bool = True
    FROM_EMAIL: str = "noreply@example.com"
    FROM_NAME: str = "Subscription API"

    # CORS
    ALLOWED_ORIGINS: list[str] = ["*"]

    # Application URLs
    FRONTEND_URL: str = "http://localhost:3000"

    # Development
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False
    TESTING: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()

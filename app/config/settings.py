"""
Configuration settings for the payment backend
Handles environment variables and application settings
"""
import json
from typing import Annotated, List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_ALLOWED_ORIGINS = [
    "https://gurukullam.github.io/Foundation",
    "https://gurukullam.github.io",
    "http://localhost:8080",
    "http://localhost:3000",
]


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields from .env file
    )

    # Application
    APP_NAME: str = "French Learning App Payment Backend"
    ENVIRONMENT: str = Field(
        "development",
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"),
    )
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Stripe
    STRIPE_SECRET_KEY: Optional[str] = None
    STRIPE_WEBHOOK_SECRET: Optional[str] = None
    STRIPE_TIMEOUT_SECONDS: float = 10.0
    STRIPE_MAX_NETWORK_RETRIES: int = 0
    # Worker threads reserved for processor calls
    PROCESSOR_MAX_WORKERS: int = 64

    # Payment intent description, customer defaults and metadata tag
    PRODUCT_NAME: str = "French Learning App"
    DEFAULT_CUSTOMER_NAME: str = "French Learning Student"
    PAYMENT_SOURCE: str = "french-learning-app"

    # CORS
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = list(DEFAULT_ALLOWED_ORIGINS)

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("STRIPE_TIMEOUT_SECONDS")
    @classmethod
    def positive_timeout(cls, v):
        if v <= 0:
            raise ValueError("STRIPE_TIMEOUT_SECONDS must be positive")
        return v

    @field_validator("PROCESSOR_MAX_WORKERS")
    @classmethod
    def positive_workers(cls, v):
        if v < 1:
            raise ValueError("PROCESSOR_MAX_WORKERS must be at least 1")
        return v

    @property
    def stripe_configured(self) -> bool:
        return bool(self.STRIPE_SECRET_KEY)


def get_settings() -> Settings:
    """Build settings from the environment (and .env if present)."""
    return Settings()

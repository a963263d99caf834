"""Application configuration."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from app.models.entities import ClientCurrency


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "Resource Planning Backend"
    app_env: str = "development"
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    database_url: str = "sqlite+pysqlite:///./resource_planning.db"
    # Keep .env support for comma-separated values (non-JSON).
    allowed_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    )

    # Values for the project created on first start when none exists.
    default_project_name: str = "Default Project"
    default_project_description: str = "Default project for resource planning"
    default_days_in_fte: int = Field(default=20, ge=1)
    default_client_currency: ClientCurrency = ClientCurrency.EUR
    default_exchange_rate: float = Field(default=0.89, gt=0)
    default_margin: float = Field(default=25.0, ge=0, lt=100)
    default_week_count: int = Field(default=8, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""

    return Settings()

"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class ApiConfig(BaseSettings):
    """REST backend configuration."""

    model_config = {"env_prefix": "ACCESSDESK_API_"}

    base_url: str = "http://localhost:3000/api"
    timeout_seconds: int = 30
    api_key: str | None = None
    page_limit: int = 100


class FormsConfig(BaseSettings):
    """Wizard form configuration."""

    model_config = {"env_prefix": "ACCESSDESK_FORMS_"}

    wizards_dir: str | None = None
    cross_field_rules_path: str | None = None


class ListConfig(BaseSettings):
    """Listing defaults."""

    model_config = {"env_prefix": "ACCESSDESK_LIST_"}

    default_sort_key: str = "created_at"
    default_sort_direction: str = "desc"


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "ACCESSDESK_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    api: ApiConfig = Field(default_factory=ApiConfig)
    forms: FormsConfig = Field(default_factory=FormsConfig)
    listing: ListConfig = Field(default_factory=ListConfig)

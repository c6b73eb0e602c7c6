from __future__ import annotations

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from crmdesk.core.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "crmdesk"
    app_env: str = "development"
    app_debug: bool = False
    app_log_level: str = "INFO"

    # Apper data API
    apper_project_id: str = ""
    apper_public_key: str = ""
    apper_api_url: str = "https://api.apper.io/v1"
    apper_timeout_seconds: float = 30.0

    # Pages
    page_size: int = 10
    recent_activity_limit: int = 5

    # Session
    auth_required: bool = True

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    def require_backend_credentials(self) -> None:
        """Fail fast when the data API credentials are missing."""
        missing = [
            name
            for name, value in (
                ("APPER_PROJECT_ID", self.apper_project_id),
                ("APPER_PUBLIC_KEY", self.apper_public_key),
            )
            if not value.strip()
        ]
        if missing:
            raise ConfigurationError(
                f"Missing backend credentials: {', '.join(missing)}",
                user_message="The service is not configured to reach the CRM backend.",
            )

    @model_validator(mode="after")
    def validate_production_credentials(self) -> Settings:
        if self.is_production:
            if not self.apper_project_id or not self.apper_public_key:
                raise ValueError("apper_project_id and apper_public_key must be set in production")
        if self.page_size < 1:
            raise ValueError("page_size must be positive")
        return self


settings = Settings()

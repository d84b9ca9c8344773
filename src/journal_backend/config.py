from __future__ import annotations

from typing import ClassVar, final

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [x.strip() for x in value.split(",") if x.strip()]


@final
class Settings(BaseSettings):
    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    app_name: str = "Journal Backend"
    app_version: str = "1.0.0"
    api_prefix: str = "/api/v1"

    # Environment (ENVIRONMENT): development | production | test
    environment: str = "development"

    log_level: str = "INFO"

    # Include the normalized exception message in 500 responses.
    # Unset means: only outside production.
    expose_error_details: bool | None = None

    # Comma-separated; /health reports the ones missing from the process environment.
    required_env_vars: str = "MONGODB_URI,JWT_SECRET,NEXTAUTH_SECRET"

    # Requests slower than this are logged at WARNING.
    slow_request_ms: int = Field(default=1000, gt=0)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "Settings":  # pyright: ignore[reportUnusedFunction]
        if not self.is_production():
            return self

        errors: list[str] = []
        if self.expose_error_details:
            errors.append("EXPOSE_ERROR_DETAILS must not be enabled in production")

        if errors:
            raise ValueError("Invalid production settings: " + "; ".join(errors))
        return self

    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    def is_development(self) -> bool:
        return self.environment.strip().lower() == "development"

    def should_expose_error_details(self) -> bool:
        if self.expose_error_details is None:
            return not self.is_production()
        return self.expose_error_details

    def required_env_vars_list(self) -> list[str]:
        return _split_csv(self.required_env_vars)

    def security_warnings(self) -> list[str]:
        warnings: list[str] = []
        if self.should_expose_error_details() and not self.is_development():
            warnings.append("error details are exposed in API responses outside development")
        if self.log_level.strip().upper() == "DEBUG" and self.is_production():
            warnings.append("LOG_LEVEL=DEBUG should not be used in production")
        return warnings


settings = Settings()

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # HTTP server
    http_host: str = Field(default="localhost", alias="HTTP_HOST")
    http_port: int = Field(default=8888, alias="HTTP_PORT")
    http_idle_timeout_seconds: int = Field(default=5, alias="HTTP_IDLE_TIMEOUT_SECONDS")
    healthcheck_port: int = Field(default=8899, alias="HEALTHCHECK_PORT")

    # Deadline applied to every store operation triggered by a request
    request_timeout_seconds: float = Field(default=30.0, gt=0, alias="REQUEST_TIMEOUT_SECONDS")

    # Stats API (HTTP Basic auth)
    stats_username: str = Field(alias="STATS_USERNAME")
    stats_password: str = Field(alias="STATS_PASSWORD")

    # JWT Configuration
    secret_key: str = Field(alias="SECRET_KEY")
    algorithm: str = Field(default="HS256", alias="ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=72 * 60, alias="ACCESS_TOKEN_EXPIRE_MINUTES"
    )

    # Storage; the in-memory store is used when the database is disabled
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    db_disabled: bool = Field(default=False, alias="DB_DISABLED")

    debug_enabled: bool = Field(default=False, alias="DEBUG_ENABLED")

    @field_validator("database_url", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for optional string fields."""
        if v == "":
            return None
        return v

    @model_validator(mode="after")
    def require_database_url(self) -> "Settings":
        if not self.db_disabled and self.database_url is None:
            raise ValueError("DATABASE_URL is required unless DB_DISABLED is set")
        return self

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()

"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables (or a ``.env`` file).
The service layer receives a ``Settings`` instance explicitly; nothing reads
the environment at call time.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        description="Async SQLAlchemy connection string (postgresql+asyncpg or sqlite+aiosqlite)",
    )

    # JWT
    jwt_secret_key: str = Field(min_length=32, description="Secret key for signing JWTs (minimum 32 characters)")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_issuer: str = Field(
        default="user-api",
        description="Value of the 'iss' claim in issued tokens; verified on decode",
    )
    jwt_expire_days: int = Field(
        default=30,
        description="Login token lifetime in days",
        gt=0,
    )

    # User policy
    admin_username: str = Field(
        default="admin",
        description="Reserved administrator account; excluded from listings and bulk deletes",
    )
    login_rejects_locked: bool = Field(
        default=False,
        description="Reject logins from locked users with the same 401 as bad credentials",
    )
    login_rejects_inactive: bool = Field(
        default=False,
        description="Reject logins from soft-deleted users with the same 401 as bad credentials",
    )
    list_active_only: bool = Field(
        default=False,
        description="Exclude soft-deleted users from user listings",
    )

    @field_validator("admin_username")
    @classmethod
    def validate_admin_username(cls, v: str) -> str:
        if not v.strip():
            msg = "admin_username must not be blank"
            raise ValueError(msg)
        return v.strip()

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    # CORS
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins",
    )

    # Environment
    environment: str = Field(
        default="production",
        description="Deployment environment name (e.g. production, dev, staging)",
    )

    # API
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API version prefix",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()  # type: ignore[call-arg]

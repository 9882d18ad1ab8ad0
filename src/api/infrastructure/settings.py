"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        DIRECTORY_DB_HOST: Database host (default: localhost)
        DIRECTORY_DB_PORT: Database port (default: 5432)
        DIRECTORY_DB_DATABASE: Database name (default: directory)
        DIRECTORY_DB_USERNAME: Database user (default: directory)
        DIRECTORY_DB_PASSWORD: Database password (required in production)
        DIRECTORY_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        DIRECTORY_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="DIRECTORY_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="directory", description="Database name")
    username: str = Field(default="directory", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class SecuritySettings(BaseSettings):
    """Login lockout and password hashing settings.

    Environment variables:
        DIRECTORY_SECURITY_MAX_FAILED_LOGIN_ATTEMPTS: Failures before lockout (default: 5)
        DIRECTORY_SECURITY_LOCKOUT_MINUTES: Lock duration in minutes (default: 30)
        DIRECTORY_SECURITY_BCRYPT_ROUNDS: bcrypt work factor (default: 12)
        DIRECTORY_SECURITY_BOOTSTRAP_ADMIN_PASSWORD: Seeds an "admin" user when set
    """

    model_config = SettingsConfigDict(
        env_prefix="DIRECTORY_SECURITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_failed_login_attempts: int = Field(
        default=5,
        description="Consecutive failed logins that lock an account",
        ge=1,
    )
    lockout_minutes: int = Field(
        default=30,
        description="How long a locked account stays locked",
        ge=1,
    )
    bcrypt_rounds: int = Field(
        default=12,
        description="bcrypt cost factor",
        ge=4,
        le=31,
    )
    bootstrap_admin_password: SecretStr | None = Field(
        default=None,
        description="Password for the seeded admin user (no admin is seeded when unset)",
    )

    @property
    def lockout_duration(self) -> timedelta:
        return timedelta(minutes=self.lockout_minutes)


class AuditSettings(BaseSettings):
    """Audit emitter settings.

    Environment variables:
        DIRECTORY_AUDIT_QUEUE_SIZE: Pending audit entries kept in memory (default: 500)
        DIRECTORY_AUDIT_FLUSH_TIMEOUT_SECONDS: Drain budget at shutdown (default: 5.0)
    """

    model_config = SettingsConfigDict(
        env_prefix="DIRECTORY_AUDIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    queue_size: int = Field(
        default=500,
        description="Maximum pending audit entries before the oldest is dropped",
        ge=1,
    )
    flush_timeout_seconds: float = Field(
        default=5.0,
        description="Seconds to wait for the queue to drain on shutdown",
        gt=0,
    )


class JobSettings(BaseSettings):
    """Background job settings.

    Environment variables:
        DIRECTORY_JOBS_PROGRESS_INTERVAL: Items between progress saves (default: 5)
        DIRECTORY_JOBS_RETENTION_DAYS: Age at which finished jobs are purged (default: 7)
    """

    model_config = SettingsConfigDict(
        env_prefix="DIRECTORY_JOBS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    progress_interval: int = Field(
        default=5,
        description="Number of processed items between progress updates",
        ge=1,
    )
    retention_days: int = Field(
        default=7,
        description="Finished jobs older than this many days are deleted",
        ge=1,
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(
        default="Member Directory API", description="Application name"
    )
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def security(self) -> SecuritySettings:
        """Get security settings."""
        return get_security_settings()

    @property
    def audit(self) -> AuditSettings:
        """Get audit settings."""
        return get_audit_settings()

    @property
    def jobs(self) -> JobSettings:
        """Get job settings."""
        return get_job_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings."""
    return DatabaseSettings()


@lru_cache
def get_security_settings() -> SecuritySettings:
    """Get cached security settings."""
    return SecuritySettings()


@lru_cache
def get_audit_settings() -> AuditSettings:
    """Get cached audit settings."""
    return AuditSettings()


@lru_cache
def get_job_settings() -> JobSettings:
    """Get cached job settings."""
    return JobSettings()

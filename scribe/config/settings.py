from typing import Optional
from urllib.parse import quote_plus

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Database configuration"""

    host: str = "localhost"
    port: int = 5432
    username: str = "postgres"
    password: SecretStr = Field(default=SecretStr("postgres"))
    database: str = "scribe"
    dsn: Optional[str] = Field(
        default=None,
        description="Full async SQLAlchemy URL; overrides the individual fields.",
    )
    serverless: bool = Field(
        default=True,
        description="If true, disable connection pooling so serverless DBs can pause.",
    )

    @property
    def url(self) -> str:
        """Get database URL"""
        if self.dsn:
            return self.dsn
        username = quote_plus(self.username)
        password = quote_plus(self.password.get_secret_value())
        return (
            "postgresql+asyncpg://"
            f"{username}:{password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class ProviderConfig(BaseSettings):
    """AssemblyAI speech-to-text configuration."""

    api_key: SecretStr | None = None
    base_url: str = "https://api.assemblyai.com/v2"
    request_timeout_seconds: float = Field(default=60.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="ASSEMBLYAI_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class IntakeConfig(BaseSettings):
    """Upload staging and validation limits."""

    staging_dir: str = "uploads"
    min_size_bytes: int = Field(default=1000, ge=0)
    max_size_bytes: int = Field(default=50 * 1024 * 1024, ge=1)
    allowed_extensions: tuple[str, ...] = (
        ".wav",
        ".mp3",
        ".mp4",
        ".aac",
        ".ogg",
        ".webm",
        ".flac",
        ".m4a",
    )

    model_config = SettingsConfigDict(
        env_prefix="UPLOAD_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class PollingConfig(BaseSettings):
    """Bounded polling budget for provider jobs."""

    interval_seconds: float = Field(default=3.0, ge=0)
    max_attempts: int = Field(default=60, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="POLLING_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class SecurityConfig(BaseSettings):
    """JWT and application security configuration."""

    jwt_secret_key: SecretStr = Field(
        default=SecretStr("change-me"),
        validation_alias="JWT_SECRET",
    )
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expires_minutes: int = Field(
        default=7 * 24 * 60,
        validation_alias="JWT_EXPIRATION_MINUTES",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Scribe Transcription Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 5000
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/transcription_pipeline.log"
    transcript_log_file: str = "logs/transcripts.log"
    log_json: bool = False

    # Database
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    # AssemblyAI
    provider: ProviderConfig = Field(default_factory=ProviderConfig)

    # Upload staging
    intake: IntakeConfig = Field(default_factory=IntakeConfig)

    # Job polling
    polling: PollingConfig = Field(default_factory=PollingConfig)

    # Security
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    # CORS
    frontend_url: str = "http://localhost:5173"
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    @property
    def cors_origins(self) -> list[str]:
        return [self.frontend_url]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()

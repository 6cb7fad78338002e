from functools import lru_cache
from pathlib import Path
from typing import Annotated, List

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = Field(default="Mosaic API", description="Human readable service name")
    environment: str = Field(default="development", description="Deployment environment name")
    debug: bool = Field(default=True, description="Enable debug mode")
    sql_echo: bool = Field(default=False, description="Log every SQL statement")

    cors_origins: Annotated[List[AnyHttpUrl], NoDecode] = Field(
        default_factory=lambda: [
            "http://localhost",
            "http://localhost:3000",
            "http://127.0.0.1",
            "http://127.0.0.1:3000",
        ],
        description="List of allowed CORS origins",
    )
    cors_allow_origin_regex: str | None = Field(
        default=r"^https?://(localhost|127\.0\.0\.1|\[::1\])(:\d+)?$",
        description="Optional regular expression that matches allowed CORS origins",
    )

    database_url: str | None = Field(
        default=None,
        description="Full SQLAlchemy URL. Takes precedence over the DB_* parts.",
    )
    db_user: str = Field(default="mosaic")
    db_password: str = Field(default="mosaic")
    db_host: str = Field(default="db")
    db_port: int = Field(default=3306)
    db_name: str = Field(default="mosaic")
    auto_create_tables: bool = Field(
        default=False,
        description="Create missing tables on startup instead of relying on external migrations.",
    )

    identity_jwt_secret: str = Field(
        default="changeme",
        description="Shared secret used to verify identity tokens signed with HS* algorithms",
    )
    identity_jwt_public_key: str | None = Field(
        default=None,
        description="PEM encoded public key used to verify RS*/ES* identity tokens",
    )
    identity_jwt_algorithm: str = Field(default="HS256")
    identity_jwt_issuer: str | None = Field(
        default=None, description="Expected `iss` claim. Skipped when unset."
    )
    identity_jwt_audience: str | None = Field(
        default=None, description="Expected `aud` claim. Skipped when unset."
    )
    identity_jwt_leeway_seconds: int = Field(default=30)

    handle_max_length: int = Field(default=64)
    display_name_max_length: int = Field(default=128, description="Matches users.display_name")
    url_max_length: int = Field(default=1024, description="Matches avatar and media URL columns")
    bio_max_length: int = Field(default=500)
    caption_max_length: int = Field(default=2200)
    comment_max_length: int = Field(default=1000)
    message_max_length: int = Field(default=2000)

    list_default_limit: int = Field(default=30)
    list_max_limit: int = Field(default=100)

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[2] / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def sqlalchemy_database_uri(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"mysql+pymysql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def identity_verification_key(self) -> str:
        if self.identity_jwt_algorithm.upper().startswith("HS"):
            return self.identity_jwt_secret
        if not self.identity_jwt_public_key:
            raise RuntimeError(
                f"IDENTITY_JWT_PUBLIC_KEY is required for {self.identity_jwt_algorithm} tokens"
            )
        return self.identity_jwt_public_key

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):  # type: ignore[override]
        if v in (None, "", Ellipsis):
            return v
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        if isinstance(v, (list, tuple, set)):
            return list(v)
        return v

    def clamp_limit(self, limit: int | None) -> int:
        """Bound a requested list size to the configured range."""

        if limit is None or limit <= 0:
            return self.list_default_limit
        return min(limit, self.list_max_limit)


@lru_cache
def get_settings() -> Settings:
    return Settings()

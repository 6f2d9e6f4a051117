from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, HttpUrl, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "Taskboard"
    API_STR: str = "/api"
    FRONTEND_HOST: str = "http://localhost:5173"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS] + [
            self.FRONTEND_HOST
        ]

    SENTRY_DSN: HttpUrl | None = None

    # Storage
    STORAGE_BACKEND: Literal["memory", "sql"] = "memory"
    DATABASE_URL: str | None = None
    DATABASE_ECHO: bool = False
    SEED_SAMPLE_USERS: bool = True

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str | None:
        if not self.DATABASE_URL:
            return None
        if self.DATABASE_URL.startswith("postgresql://"):
            return self.DATABASE_URL.replace(
                "postgresql://", "postgresql+psycopg://", 1
            )
        elif self.DATABASE_URL.startswith("postgres://"):
            return self.DATABASE_URL.replace("postgres://", "postgresql+psycopg://", 1)
        else:
            return self.DATABASE_URL

    @model_validator(mode="after")
    def _require_database_url(self) -> Self:
        if self.STORAGE_BACKEND == "sql" and not self.DATABASE_URL:
            raise ValueError(
                "DATABASE_URL must be set when STORAGE_BACKEND is 'sql'"
            )
        return self

    # Front-end admin panel gate. Not an access control mechanism.
    ADMIN_UNLOCK_CODE: str = "332133"

    # Observability Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # "json" or "console"
    LOG_SQL: bool = False
    ENABLE_METRICS: bool = True


settings = Settings()  # type: ignore

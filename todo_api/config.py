"""
Todo API — Application Configuration
=====================================

What:  Typed configuration loaded with Pydantic Settings.
Why:   Type-safe loading from a dotenv file with environment variable overrides,
       validated once at startup so bad values fail fast.
How:   `load_settings()` builds an immutable `Settings` object. Values come from
       (highest priority first) process environment, the dotenv file, then defaults.
Who:   Called by the process bootstrap (`python -m todo_api`), the ASGI factory
       and Alembic. The resulting object is passed explicitly to `create_app()`.
When:  Once per process.

Environment variable naming:
    Prefix `APP_`, nested sections separated by a double underscore:

        APP_SERVER__PORT=8080
        APP_DATABASE__HOST=db
        APP_DATABASE__PASSWORD=secret
        APP_LOG_LEVEL=DEBUG
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

# Searched in order; later files override earlier ones.
DEFAULT_ENV_FILES: Tuple[str, ...] = ("config/.env", ".env")


class ServerSettings(BaseModel):
    """HTTP listener settings."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="0.0.0.0")

    # Kept as a string to match the deployment files, validated as a port number
    port: str = Field(default="8080")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: str) -> str:
        v = str(v).strip()
        if not v.isdigit() or not 1 <= int(v) <= 65535:
            raise ValueError(f"Invalid server port '{v}'. Must be a number between 1 and 65535")
        return v

    @property
    def port_number(self) -> int:
        return int(self.port)


class DatabaseSettings(BaseModel):
    """
    Relational store connection settings.

    Either the discrete PostgreSQL fields (host, port, user, password, dbname,
    sslmode) or a full SQLAlchemy `url` may be given. When `url` is set it wins;
    tests use it to point at SQLite.

    Pool sizing:
        pool_size + max_overflow bounds the number of concurrent statements.
        The pool is the only throttle in the system.
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="localhost")
    port: str = Field(default="5432")
    user: str = Field(default="postgres")
    password: str = Field(default="postgres")
    dbname: str = Field(default="todo_db")
    sslmode: str = Field(default="disable")

    url: Optional[str] = Field(default=None, description="Full SQLAlchemy URL override")

    pool_size: int = Field(default=10, ge=1, le=100)
    max_overflow: int = Field(default=5, ge=0, le=50)
    pool_pre_ping: bool = Field(default=True)

    # Run CREATE TABLE IF NOT EXISTS at startup
    create_schema: bool = Field(default=True)

    @field_validator("sslmode")
    @classmethod
    def validate_sslmode(cls, v: str) -> str:
        valid = {"disable", "allow", "prefer", "require", "verify-ca", "verify-full"}
        if v not in valid:
            raise ValueError(f"Invalid sslmode '{v}'. Must be one of: {sorted(valid)}")
        return v

    @property
    def sqlalchemy_url(self) -> URL:
        """Async SQLAlchemy URL (asyncpg driver unless overridden by `url`)."""
        if self.url:
            return make_url(self.url)
        return URL.create(
            "postgresql+asyncpg",
            username=self.user,
            password=self.password,
            host=self.host,
            port=int(self.port),
            database=self.dbname,
        )

    @property
    def is_postgres(self) -> bool:
        return self.sqlalchemy_url.get_backend_name() == "postgresql"


class Settings(BaseSettings):
    """
    Root settings object.

    Immutable after construction. Nothing in the package reads configuration
    from a global; components receive the values they need from this object.
    """

    server: ServerSettings = Field(default_factory=ServerSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_nested_delimiter="__",
        env_file=DEFAULT_ENV_FILES,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Load settings from a dotenv file and the process environment.

    Args:
        env_file: Explicit dotenv path. Defaults to `config/.env` then `.env`
                  (missing files are skipped).

    Raises:
        pydantic.ValidationError: A value failed validation. Callers treat
            this as fatal.
    """
    if env_file is not None:
        return Settings(_env_file=env_file)
    return Settings()

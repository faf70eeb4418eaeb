"""Configuration management for loan-tracker."""

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_TIMEZONE = "America/Sao_Paulo"


class BackendMode(str, Enum):
    """Which storage implementation the application runs against."""

    CONNECTED = "CONNECTED"
    MOCK = "MOCK"


@dataclass
class BackendConfig:
    """Hosted backend credentials.

    URL and anonymous key together enable connected mode (live persistence and
    authentication). The service-role key only unlocks user administration and
    is checked independently of the other two. In connected mode the CLI signs
    in with ``email`` and ``password`` before reading or writing data.
    """

    url: str | None = None
    anon_key: str | None = None
    service_role_key: str | None = None
    timeout: float | None = None  # None = wait indefinitely
    email: str | None = None  # Account the CLI signs in with
    password: str | None = None

    @property
    def mode(self) -> BackendMode:
        """Storage mode selected by the presence of URL and anonymous key."""
        if self.url and self.anon_key:
            return BackendMode.CONNECTED
        return BackendMode.MOCK

    @property
    def is_configured(self) -> bool:
        return self.mode == BackendMode.CONNECTED

    @property
    def has_credentials(self) -> bool:
        return bool(self.email and self.password)

    @property
    def has_admin(self) -> bool:
        return bool(self.url and self.service_role_key)

    @property
    def rest_url(self) -> str:
        """Base URL of the REST data API."""
        return f"{(self.url or '').rstrip('/')}/rest/v1"

    @property
    def auth_url(self) -> str:
        """Base URL of the authentication API."""
        return f"{(self.url or '').rstrip('/')}/auth/v1"


@dataclass
class PostgresConfig:
    """Direct PostgreSQL connection used by the bootstrap script."""

    host: str = "localhost"
    port: int = 5432
    database: str = "postgres"
    user: str = "postgres"
    password: str = "postgres"
    url: str | None = None

    @property
    def connection_string(self) -> str:
        """Get connection string, preferring an explicit URL."""
        if self.url:
            return self.url
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class AppConfig:
    """Main configuration for loan-tracker."""

    backend: BackendConfig = field(default_factory=BackendConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    timezone: str = DEFAULT_TIMEZONE
    log_level: str = "INFO"
    log_format: str = "standard"
    seed: int | None = None

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create config from environment variables."""
        import os

        timeout_str = os.getenv("BACKEND_TIMEOUT")
        backend = BackendConfig(
            url=os.getenv("SUPABASE_URL") or None,
            anon_key=os.getenv("SUPABASE_ANON_KEY") or None,
            service_role_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY") or None,
            timeout=float(timeout_str) if timeout_str else None,
            email=os.getenv("SUPABASE_EMAIL") or None,
            password=os.getenv("SUPABASE_PASSWORD") or None,
        )

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "postgres"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            url=os.getenv("DATABASE_URL") or None,
        )

        return cls(
            backend=backend,
            postgres=postgres,
            timezone=os.getenv("TIMEZONE", DEFAULT_TIMEZONE),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
            seed=int(os.getenv("SEED")) if os.getenv("SEED") else None,
        )

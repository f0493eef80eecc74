"""Server configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings.

    Every field maps to the upper-cased environment variable of the same name,
    e.g. ``MCP_AUTH_TOKEN`` or ``SESSION_TTL_MS``.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"
    base_url: str = "http://localhost:3000"

    # Authentication (unset token disables auth)
    mcp_auth_token: str | None = None

    # CORS
    allowed_origins: str = "*"

    # Sessions
    session_ttl_ms: int = Field(default=30 * 60 * 1000, ge=1)
    session_sweep_interval_seconds: float = Field(default=60.0, gt=0)

    # Rate limiting
    rate_limit_requests: int = Field(default=60, ge=1)
    rate_limit_window_ms: int = Field(default=60 * 1000, ge=1)

    # Upstream API
    sr_api_base: str = "https://api.sr.se/api/v2"
    upstream_timeout_seconds: float = Field(default=10.0, gt=0)
    default_cache_ttl_seconds: int = Field(default=5 * 60, ge=0)

    max_json_payload_size: int = 10 * 1024 * 1024

    # Error tracking (optional)
    sentry_dsn: str | None = None

    @property
    def cors_origins_list(self) -> list[str]:
        """Allowed CORS origins as a list (``["*"]`` for wildcard)."""
        origins = [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return origins or ["*"]

    @property
    def auth_required(self) -> bool:
        return bool(self.mcp_auth_token)

    @property
    def session_ttl_seconds(self) -> float:
        return self.session_ttl_ms / 1000

    @property
    def rate_limit_window_seconds(self) -> float:
        return self.rate_limit_window_ms / 1000


settings = Settings()

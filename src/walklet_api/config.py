"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

_LOCAL_ORIGIN_REGEX = r"^http://(localhost|127\.0\.0\.1):(3000|3001)$"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    jwt_secret: str
    jwt_expiry_days: int = 7
    google_client_id: str | None = None
    wallet_encryption_key: str | None = None
    fdc_api_key: str = "DEMO_KEY"
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    fdc_timeout_seconds: float = 15.0
    chain_id: int = 11155111
    stpc_contract_address: str | None = None
    reward_steps_per_stpc: int = 1000
    reward_signer_private_key: str | None = None
    dev_routes_enabled: bool = False
    cors_origin_regex: str = _LOCAL_ORIGIN_REGEX
    local_timezone: str = "UTC"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def dev_mode(self) -> bool:
        """Return True when development-only routes should be mounted."""
        return self.dev_routes_enabled

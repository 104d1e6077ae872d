"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_PAYLOAD_BYTES_DEFAULT = 65_536
DEFAULT_ALGORITHM = "HS256"
DEFAULT_EXPIRATION_PRESET = "1h"


class ForgeSettings(BaseSettings):
    """Token composition and service settings."""

    model_config = SettingsConfigDict(env_prefix="JWTFORGE_")

    default_algorithm: str = DEFAULT_ALGORITHM
    default_expiration: str = DEFAULT_EXPIRATION_PRESET
    max_payload_bytes: int = MAX_PAYLOAD_BYTES_DEFAULT
    log_level: str = "INFO"
    log_json: bool = False
    cors_origins: str = ""

    def get_cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins."""
        if not self.cors_origins:
            return []
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


class IdentitySettings(BaseSettings):
    """Overrides for the OS identity used to derive the at-rest cipher key."""

    model_config = SettingsConfigDict(env_prefix="JWTFORGE_IDENTITY_")

    username: str = ""
    hostname: str = ""

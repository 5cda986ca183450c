from functools import lru_cache
from typing import Tuple

from pydantic_settings import BaseSettings, SettingsConfigDict

# Engine versions this client was built against, inclusive
SUPPORTED_ENGINE_VERSION_RANGE: Tuple[str, str] = ("0.0.1", "0.0.1")


class KasaneSettings(BaseSettings):
    """Client settings, read from KASANE_* environment variables or .env."""

    model_config = SettingsConfigDict(env_prefix="KASANE_", env_file=".env", extra="ignore")

    DEBUG: bool = False
    CHECK_VERSION: bool = True
    LOG_LEVEL: str = "WARNING"

    MIN_ENGINE_VERSION: str = SUPPORTED_ENGINE_VERSION_RANGE[0]
    MAX_ENGINE_VERSION: str = SUPPORTED_ENGINE_VERSION_RANGE[1]

    @property
    def supported_engine_versions(self) -> Tuple[str, str]:
        return (self.MIN_ENGINE_VERSION, self.MAX_ENGINE_VERSION)


@lru_cache()
def get_settings() -> KasaneSettings:
    return KasaneSettings()

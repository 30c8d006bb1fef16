"""Centralized package configuration.

All settings are read from environment variables prefixed with KMAPS_
(or a .env.kmaps file). Every field has a default, so Settings() always
succeeds unless a variable holds an invalid value.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="KMAPS_", env_file=".env.kmaps", env_file_encoding="utf-8",
    )

    # Pawn structure cache. 0 means no eviction.
    pawn_cache_size: int = Field(default=4096, ge=0)
    pawn_cache_enabled: bool = True

    # Reject every position python-chess flags, not only kingless ones
    strict_validation: bool = False

    log_level: str = "WARNING"

    @property
    def pawn_cache_max_entries(self) -> int | None:
        """Cache bound as the cache expects it: None for unbounded."""
        return self.pawn_cache_size or None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings for the process, read once. cache_clear() re-reads them."""
    return Settings()

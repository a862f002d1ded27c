from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class PortalSettings(BaseSettings):
    api_base_url: str = "http://localhost:10723"
    request_timeout_seconds: float = 20.0

    load_retry_attempts: int = 3
    load_retry_delay_seconds: float = 1.0

    state_dir: Path = Path(".academy")
    # Per-value limit, same order as a browser's localStorage quota.
    storage_quota_bytes: int = 5 * 1024 * 1024

    model_config = SettingsConfigDict(env_prefix="PORTAL_", env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache(maxsize=1)
def get_portal_settings() -> PortalSettings:
    return PortalSettings()

"""Runtime configuration for the marketplace API.

Every value can be overridden from the environment.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


# Data access
USE_REAL_API = _env_flag("USE_REAL_API")  # False -> in-memory mock data
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
MOCK_LATENCY_MS = _env_int("MOCK_LATENCY_MS", 0)
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = _env_int("DEFAULT_PAGE_SIZE", 20)
FEATURED_LIMIT = 8
RELATED_LIMIT = 4

# Access control
SIGN_IN_PATH = os.getenv("SIGN_IN_PATH", "/sign-in")
UNAUTHORIZED_PATH = os.getenv("UNAUTHORIZED_PATH", "/unauthorized")

# User state persistence
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")  # 'memory' | 'mongo'
STORAGE_PREFIX = os.getenv("STORAGE_PREFIX", "lpx_")
STORAGE_COLLECTION = "kv_store"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


@dataclass(frozen=True)
class Settings:
    """Snapshot of the settings a factory or store is built from."""

    use_real_api: bool = USE_REAL_API
    api_base_url: str = API_BASE_URL
    mock_latency_ms: int = MOCK_LATENCY_MS
    storage_backend: str = STORAGE_BACKEND
    storage_prefix: str = STORAGE_PREFIX

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            use_real_api=_env_flag("USE_REAL_API"),
            api_base_url=os.getenv("API_BASE_URL", API_BASE_URL),
            mock_latency_ms=_env_int("MOCK_LATENCY_MS", 0),
            storage_backend=os.getenv("STORAGE_BACKEND", "memory"),
            storage_prefix=os.getenv("STORAGE_PREFIX", "lpx_"),
        )

"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_TRUTHY = {"1", "true", "yes", "on"}


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    """Centralised ingestion settings based on OS environment variables."""

    environment: str = "dev"
    log_level: str = "INFO"

    max_images: int = 10
    encode_timeout: float = 30.0
    verify_images: bool = True

    def __post_init__(self) -> None:
        if self.max_images <= 0:
            raise ValueError(f"max_images must be positive, got {self.max_images}")
        if self.encode_timeout <= 0:
            raise ValueError(f"encode_timeout must be positive, got {self.encode_timeout}")


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        max_images=int(os.getenv("INGEST_MAX_IMAGES", "10")),
        encode_timeout=float(os.getenv("INGEST_ENCODE_TIMEOUT", "30")),
        verify_images=os.getenv("INGEST_VERIFY_IMAGES", "true").strip().lower() in _TRUTHY,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()

"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


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
    """Centralised project settings based on OS environment variables."""

    environment: str = "dev"
    log_level: str = "INFO"

    bot_token: str = ""
    storage_root: str = "storage/users"

    classifier_model: str = "openai/clip-vit-base-patch32"
    classifier_device: str = "cpu"


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        bot_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
        storage_root=os.getenv("DRESSMEWELL_STORAGE_ROOT", "storage/users"),
        classifier_model=os.getenv("BODY_SHAPE_MODEL", "openai/clip-vit-base-patch32"),
        classifier_device=os.getenv("BODY_SHAPE_DEVICE", "cpu"),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()

import os
from dataclasses import dataclass, field
from typing import List


def _split_csv(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _as_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    DB_PATH: str = os.getenv("DB_PATH", "./wallet.db")
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "sqlite")  # sqlite | memory
    API_PREFIX: str = os.getenv("API_PREFIX", "/api")

    # PUT на несуществующий id: по умолчанию upsert, в строгом режиме - 404
    STRICT_UPDATES: bool = _as_bool(os.getenv("STRICT_UPDATES", "false"))

    CORS_ORIGINS: List[str] = field(
        default_factory=lambda: _split_csv(
            os.getenv("CORS_ORIGINS", "http://localhost:8000,http://localhost:3000")
        )
    )
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()

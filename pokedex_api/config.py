"""
Application settings read from environment variables.

Values are read when ``Settings()`` is instantiated, so the FastAPI lifespan
picks up whatever the environment holds at startup.
"""
import os
from dataclasses import dataclass, field
from typing import Optional


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    pokeapi_base_url: str = field(
        default_factory=lambda: os.getenv("POKEAPI_BASE_URL", "https://pokeapi.co/api/v2")
    )
    http_timeout: float = field(default_factory=lambda: float(os.getenv("HTTP_TIMEOUT", "5.0")))

    # Any SQLAlchemy async URL works here, e.g. postgresql+asyncpg://...
    database_url: str = field(
        default_factory=lambda: os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./pokedex.db")
    )
    database_echo: bool = field(default_factory=lambda: _env_flag("DATABASE_ECHO"))

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE") or None)

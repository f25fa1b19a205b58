"""Configuration management for payroll records."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    remote_api_url: str
    remote_backend: str
    remote_timeout_seconds: float
    audit_actor: str
    default_department_id: int
    default_employee_password: str
    host: str
    port: int
    debug: bool
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.remote_backend not in {"http", "stub"}:
            raise ValueError("remote_backend must be 'http' or 'stub'")
        if self.remote_timeout_seconds <= 0:
            raise ValueError("remote_timeout_seconds must be positive")

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            remote_api_url=os.getenv("REMOTE_API_URL", "http://localhost:8000/api/"),
            remote_backend=os.getenv("REMOTE_BACKEND", "http"),
            remote_timeout_seconds=float(os.getenv("REMOTE_TIMEOUT_SECONDS", "30")),
            audit_actor=os.getenv("AUDIT_ACTOR", "Admin"),
            default_department_id=int(os.getenv("DEFAULT_DEPARTMENT_ID", "1")),
            default_employee_password=os.getenv(
                "DEFAULT_EMPLOYEE_PASSWORD", "defaultpassword123"
            ),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8080")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()

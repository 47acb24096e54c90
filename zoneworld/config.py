from __future__ import annotations

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

APP_VERSION = "0.1.0"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ------------------------------------------------------------
    # Server
    # ------------------------------------------------------------
    backend_host: str = "0.0.0.0"
    backend_port: int = 8080
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"

    # ------------------------------------------------------------
    # CORS
    # ------------------------------------------------------------
    # Comma-separated origins, e.g.:
    # "http://localhost:3000,http://localhost:5173"
    cors_origins: str = "http://localhost:3000"

    # ------------------------------------------------------------
    # Migration
    # ------------------------------------------------------------
    migration_enabled: bool = True
    migration_interval_s: float = 5.0
    migration_probability: float = 0.1
    # Fix to make migration draws reproducible
    random_seed: Optional[int] = None

    @property
    def cors_origins_list(self) -> List[str]:
        return [x.strip() for x in self.cors_origins.split(",") if x.strip()]

    def validate_runtime(self) -> None:
        """Fail fast on migration parameters the scheduler cannot honour."""
        problems = []
        if not 0.0 <= self.migration_probability <= 1.0:
            problems.append(f"MIGRATION_PROBABILITY must be within [0, 1], got {self.migration_probability}")
        if self.migration_interval_s <= 0:
            problems.append(f"MIGRATION_INTERVAL_S must be positive, got {self.migration_interval_s}")
        if problems:
            raise RuntimeError("Invalid configuration: " + "; ".join(problems))


settings = Settings()
settings.validate_runtime()

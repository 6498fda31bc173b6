# school_admin/core/config.py
"""
Application settings loaded from environment variables (and .env).
"""

import os
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import PaymentMethod, ReceiptCounterReset

# Default SQLite location: data/db/school.sqlite next to the package
DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "data")
DEFAULT_DATABASE_FILE = os.path.join(DATA_DIR, "db", "school.sqlite")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str | None = None
    app_env: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000"
    audit_log_file: str = os.path.join("logs", "audit.log")

    # --- Recibos ---
    receipt_prefix: str = "REC"
    receipt_counter_reset: ReceiptCounterReset = ReceiptCounterReset.NEVER
    receipt_max_retries: int = 3

    # Comma separated, e.g. "Efectivo,Transferencia"
    payment_methods: str = ",".join(m.value for m in PaymentMethod)

    # --- Inventario ---
    low_stock_threshold: int = 10

    @property
    def resolved_database_url(self) -> str:
        """DATABASE_URL if set, otherwise the default SQLite file (created on demand)."""
        if self.database_url:
            return self.database_url
        os.makedirs(os.path.dirname(DEFAULT_DATABASE_FILE), exist_ok=True)
        return f"sqlite:///{DEFAULT_DATABASE_FILE}"

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def accepted_payment_methods(self) -> list[str]:
        return [m.strip() for m in self.payment_methods.split(",") if m.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()

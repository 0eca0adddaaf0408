"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.
"""

import os

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache
from typing import Optional


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "Residency Board"
    debug: bool = False

    # Database (postgresql+psycopg for psycopg3; use postgresql:// for psycopg2)
    database_url: str = "postgresql+psycopg://localhost:5432/residency_board_dev"
    db_connect_timeout: int = 10  # seconds

    # Security
    internal_job_token: str = ""  # Required for /internal/* endpoints
    admin_password: str = ""  # Shared secret for /api/admin/* mutations

    # Admin login rate limit: max attempts per window, one global counter
    login_max_attempts: int = 5
    login_window_minutes: int = 15

    # Upstream source (Softr datasource proxy in front of Airtable)
    softr_jwt_token: Optional[str] = None
    source_base_url: str = "https://sheryl9652.preview.softr.app"
    source_endpoints_json: str = ""  # JSON override for the endpoint table
    source_timeout: float = 30.0
    source_max_pages: int = 50

    # Uploaded company logos
    media_dir: str = "media"

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"

        default_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
        default_url = (
            f"postgresql+psycopg://{default_user}:"
            f"{os.getenv('PGPASSWORD', '')}@"
            f"{os.getenv('PGHOST', 'localhost')}:"
            f"{os.getenv('PGPORT', '5432')}/"
            f"{os.getenv('PGDATABASE', 'residency_board_dev')}"
        )
        raw_url = os.getenv("DATABASE_URL", default_url)
        # Ensure psycopg3 driver if URL uses generic postgresql://
        if raw_url.startswith("postgresql://") and not raw_url.startswith("postgresql+psycopg"):
            raw_url = raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.database_url = raw_url
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        self.internal_job_token = os.getenv("INTERNAL_JOB_TOKEN", "")
        self.admin_password = os.getenv("ADMIN_PASSWORD", "")

        self.login_max_attempts = int(
            os.getenv("LOGIN_MAX_ATTEMPTS", str(self.login_max_attempts))
        )
        self.login_window_minutes = int(
            os.getenv("LOGIN_WINDOW_MINUTES", str(self.login_window_minutes))
        )

        token = os.getenv("SOFTR_JWT_TOKEN", "").strip()
        self.softr_jwt_token = token or None
        self.source_base_url = os.getenv("SOURCE_BASE_URL", self.source_base_url).rstrip("/")
        self.source_endpoints_json = os.getenv("SOURCE_ENDPOINTS", "").strip()
        self.source_timeout = float(os.getenv("SOURCE_TIMEOUT", str(self.source_timeout)))
        self.source_max_pages = int(os.getenv("SOURCE_MAX_PAGES", str(self.source_max_pages)))

        self.media_dir = os.getenv("MEDIA_DIR", self.media_dir)

from __future__ import annotations

import os
from pathlib import Path
from typing import List


class Settings:
    """Centralized configuration for the mealfit backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("MEALFIT_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("MEALFIT_DB_PATH") or (self.data_root / "mealfit.db")
        ).expanduser()

        # In production you MUST set MEALFIT_SESSION_SECRET. The dev fallback keeps local
        # demos easy, but is not safe for public deployments.
        self.session_secret: str = os.environ.get("MEALFIT_SESSION_SECRET") or "dev-secret-change-me"
        self.session_ttl_days: int = int(os.environ.get("MEALFIT_SESSION_TTL_DAYS") or "30")
        self.cookie_secure: bool = (os.environ.get("MEALFIT_COOKIE_SECURE") or "").strip() in {"1", "true", "True"}

        # This address is always promoted to SUPER_ADMIN and auto-approved at sign-in.
        self.super_admin_email: str = (
            os.environ.get("MEALFIT_SUPER_ADMIN_EMAIL") or "admin@example.com"
        ).strip().lower()

        self.base_url: str = (os.environ.get("MEALFIT_BASE_URL") or "http://127.0.0.1:8000").rstrip("/")
        self.google_client_id: str | None = os.environ.get("GOOGLE_CLIENT_ID") or None
        self.google_client_secret: str | None = os.environ.get("GOOGLE_CLIENT_SECRET") or None
        self.oauth_timeout: float = float(os.environ.get("MEALFIT_OAUTH_TIMEOUT") or "10")

        self.log_level: str = (os.environ.get("MEALFIT_LOG_LEVEL") or "INFO").upper()

        cors = os.environ.get("MEALFIT_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()

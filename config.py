"""
Runtime configuration.

Values come from environment variables; a `.env` file in the project root is
loaded first if present.

Variables:
- SUPABASE_URL: Supabase project URL (required for any database call)
- SUPABASE_KEY: Supabase API key (use a server-side key only on the backend)
- REPURCHASE_THRESHOLD_DAYS: days since last purchase before a client is
  flagged for recontact (default 28)
- LOG_LEVEL: logging level for the API and scripts (default INFO)
- CORS_ALLOW_ORIGINS: comma-separated list of allowed origins (default *)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

env_path = Path(__file__).parent / ".env"
load_dotenv(dotenv_path=env_path)


class Config:
    SUPABASE_URL: str | None = os.getenv("SUPABASE_URL")
    SUPABASE_KEY: str | None = os.getenv("SUPABASE_KEY")

    REPURCHASE_THRESHOLD_DAYS: int = int(os.getenv("REPURCHASE_THRESHOLD_DAYS", "28"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    CORS_ALLOW_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
        if origin.strip()
    ]


__all__ = ["Config"]

"""
Supabase client initialization.

This module contains *only* the database connection setup. The client is
created on first use so that importing a repository module never requires
credentials; `get_client()` raises if they are missing at call time.

Environment variables required (see config.py):
- SUPABASE_URL: Your Supabase project URL
- SUPABASE_KEY: Your Supabase API key (use a server-side key only on the backend)
"""

from __future__ import annotations

# The dependency is `supabase` (supabase-py). If your editor can't resolve it,
# install it in your environment: `pip install supabase`.
from supabase import Client, create_client  # type: ignore[import-not-found]

from config import Config

_client: Client | None = None


def get_client() -> Client:
    """Return the shared Supabase client, creating it on first call."""

    global _client
    if _client is not None:
        return _client

    if not Config.SUPABASE_URL:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )

    if not Config.SUPABASE_KEY:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    _client = create_client(Config.SUPABASE_URL, Config.SUPABASE_KEY)
    return _client


__all__ = ["get_client"]

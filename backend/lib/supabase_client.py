"""
Supabase client for the mentor backend
"""
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from supabase import Client, create_client

load_dotenv()
load_dotenv('../.env')  # Also try parent directory

logger = logging.getLogger(__name__)

_supabase_client: Optional[Client] = None


def supabase_configured() -> bool:
    return bool(os.getenv("SUPABASE_URL") and os.getenv("SUPABASE_SERVICE_KEY"))


def get_supabase_client() -> Client:
    """Get or create the Supabase client singleton (service role key)."""
    global _supabase_client

    if _supabase_client is None:
        url = os.getenv("SUPABASE_URL")
        key = os.getenv("SUPABASE_SERVICE_KEY")

        if not url or not key:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set in environment")

        _supabase_client = create_client(url, key)
        logger.info("✅ Supabase client created")

    return _supabase_client


def get_optional_supabase_client() -> Optional[Client]:
    """Supabase client when configured, else None (callers fall back to in-memory stores)."""
    if not supabase_configured():
        return None
    try:
        return get_supabase_client()
    except Exception as e:
        logger.warning(f"⚠️ Supabase client unavailable, using in-memory stores: {e}")
        return None

"""
Supabase client factories

The sync client backs the repositories; the async client is only needed
for Realtime subscriptions.
"""
from functools import lru_cache

from supabase import AsyncClient, Client, acreate_client, create_client

from valet.config import get_settings
from valet.utils.logger import get_logger

logger = get_logger(__name__)


@lru_cache()
def get_supabase_client() -> Client:
    """Shared sync client, authenticated with the server-side key"""
    settings = get_settings()
    logger.info("Creating Supabase client for %s", settings.supabase_url)
    return create_client(settings.supabase_url, settings.SUPABASE_WRITE_KEY)


async def create_async_supabase_client() -> AsyncClient:
    """New async client; each live status stream owns one"""
    settings = get_settings()
    return await acreate_client(settings.supabase_url, settings.supabase_key)

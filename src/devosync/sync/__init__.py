"""Remote store backends."""

from devosync.sync.base import RemoteStore
from devosync.sync.supabase import SupabaseRestClient

__all__ = ["RemoteStore", "SupabaseRestClient"]

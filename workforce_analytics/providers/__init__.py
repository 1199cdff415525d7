from .base import FetchRequest, RecordBundle, RecordFetcher, RecordFetchError
from .memory_provider import InMemoryRecordFetcher
from .supabase_provider import SupabaseRecordFetcher

__all__ = [
    "FetchRequest",
    "RecordBundle",
    "RecordFetcher",
    "RecordFetchError",
    "InMemoryRecordFetcher",
    "SupabaseRecordFetcher",
]

"""Run stores."""

from __future__ import annotations

from nicherank.config import Settings
from nicherank.storage.base import RunStore
from nicherank.storage.file_store import FileRunStore
from nicherank.storage.memory_store import InMemoryRunStore


def build_run_store(settings: Settings) -> RunStore:
    """Create the run store selected by ``settings.store_backend``."""

    if settings.store_backend == "file":
        return FileRunStore(settings.store_dir)
    if settings.store_backend == "redis":
        from nicherank.storage.redis_store import RedisRunStore

        return RedisRunStore(
            redis_url=settings.redis_url,
            key_prefix=settings.redis_key_prefix,
            ttl_seconds=settings.redis_ttl_s,
        )
    return InMemoryRunStore()


__all__ = ["FileRunStore", "InMemoryRunStore", "RunStore", "build_run_store"]

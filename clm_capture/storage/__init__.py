"""Capture stores."""
from __future__ import annotations

from ..config import AppConfig
from ..interfaces.store import CaptureStore
from .file_store import FileCaptureStore
from .supabase import StoreError, SupabaseCaptureStore

__all__ = ["FileCaptureStore", "StoreError", "SupabaseCaptureStore", "build_store"]


def build_store(config: AppConfig) -> CaptureStore:
    """Store for the configured backend."""
    if config.storage.backend == "supabase":
        return SupabaseCaptureStore(config.storage.supabase)
    return FileCaptureStore(config.storage.file.path, config.capture.max_captures)

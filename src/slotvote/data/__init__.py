"""Data access layer."""

from __future__ import annotations

from .supabase import SupabaseGateway, SupabaseNotInitializedError, is_uuid

__all__ = ["SupabaseGateway", "SupabaseNotInitializedError", "is_uuid"]

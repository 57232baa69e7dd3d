from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ...domain import RateLimitRecord
from ..supabase import SupabaseGateway


@dataclass(slots=True)
class RateLimitRepository:
    gateway: SupabaseGateway
    table_name: str

    def count_since(self, ip: str, path: str, since: datetime) -> int:
        response = (
            self.gateway.table(self.table_name)
            .select("created_at")
            .eq("ip", ip)
            .eq("path", path)
            .gte("created_at", since.isoformat())
            .execute()
        )
        return len(response.data or [])

    def record(self, entry: RateLimitRecord) -> None:
        self.gateway.table(self.table_name).insert(entry.to_record()).execute()

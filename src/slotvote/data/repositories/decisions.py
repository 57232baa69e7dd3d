from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ...domain import Decision
from ..supabase import SupabaseGateway, is_uuid


@dataclass(slots=True)
class DecisionRepository:
    gateway: SupabaseGateway
    table_name: str

    def insert(self, decision: Decision) -> Decision:
        payload = decision.to_record()
        response = self.gateway.table(self.table_name).insert(payload).execute()
        rows = response.data or [payload]
        return Decision.from_record(rows[0])

    def latest(self, event_id: str) -> Optional[Decision]:
        if not is_uuid(event_id):
            return None
        response = (
            self.gateway.table(self.table_name)
            .select("*")
            .eq("event_id", event_id)
            .order("decided_at", desc=True)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return Decision.from_record(rows[0]) if rows else None

    def list_for_event(self, event_id: str) -> List[Decision]:
        if not is_uuid(event_id):
            return []
        response = (
            self.gateway.table(self.table_name)
            .select("*")
            .eq("event_id", event_id)
            .order("decided_at", desc=False)
            .execute()
        )
        return [Decision.from_record(record) for record in response.data or []]

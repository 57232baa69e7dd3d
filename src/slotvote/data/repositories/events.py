from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ...domain import Event
from ..supabase import SupabaseGateway, is_uuid


@dataclass(slots=True)
class EventRepository:
    gateway: SupabaseGateway
    table_name: str

    def insert(self, payload: Dict[str, Any]) -> Event:
        response = self.gateway.table(self.table_name).insert(payload).execute()
        rows = response.data or [payload]
        return Event.from_record(rows[0])

    def fetch(self, event_id: str) -> Optional[Event]:
        if not is_uuid(event_id):
            return None
        response = (
            self.gateway.table(self.table_name)
            .select("*")
            .eq("id", event_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        if not rows:
            return None
        return Event.from_record(rows[0])

    def organizer_token(self, event_id: str) -> Optional[str]:
        if not is_uuid(event_id):
            return None
        response = (
            self.gateway.table(self.table_name)
            .select("organizer_token")
            .eq("id", event_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        if not rows:
            return None
        return rows[0].get("organizer_token")

    def replace_organizer_token(self, event_id: str, token: str) -> Optional[str]:
        """Swap the organizer token in one UPDATE; returns None when the event is absent."""

        if not is_uuid(event_id):
            return None
        response = (
            self.gateway.table(self.table_name)
            .update({"organizer_token": token})
            .eq("id", event_id)
            .execute()
        )
        rows = response.data or []
        if not rows:
            return None
        return rows[0].get("organizer_token")

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from ...domain import Participant
from ..supabase import SupabaseGateway, is_uuid


@dataclass(slots=True)
class ParticipantRepository:
    gateway: SupabaseGateway
    table_name: str

    def insert_many(self, rows: List[Dict[str, Any]]) -> List[Participant]:
        response = self.gateway.table(self.table_name).insert(rows).execute()
        return [Participant.from_record(record) for record in response.data or rows]

    def list_for_event(self, event_id: str, *, order_by: str = "invited_at", desc: bool = False) -> List[Participant]:
        if not is_uuid(event_id):
            return []
        response = (
            self.gateway.table(self.table_name)
            .select("*")
            .eq("event_id", event_id)
            .order(order_by, desc=desc)
            .execute()
        )
        return [Participant.from_record(record) for record in response.data or []]

    def find_by_invite_token(self, event_id: str, invite_token: str) -> Optional[Participant]:
        if not is_uuid(event_id):
            return None
        response = (
            self.gateway.table(self.table_name)
            .select("*")
            .eq("event_id", event_id)
            .eq("invite_token", invite_token)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return Participant.from_record(rows[0]) if rows else None

    def touch(self, participant_id: str, when: datetime) -> None:
        (
            self.gateway.table(self.table_name)
            .update({"last_active_at": when.isoformat()})
            .eq("id", participant_id)
            .execute()
        )

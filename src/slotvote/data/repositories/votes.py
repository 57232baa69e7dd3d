from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ...domain import Vote
from ..supabase import SupabaseGateway, is_uuid


@dataclass(slots=True)
class VoteRepository:
    gateway: SupabaseGateway
    table_name: str

    def upsert(self, vote: Vote) -> Vote:
        payload = vote.to_record()
        response = (
            self.gateway.table(self.table_name)
            .upsert(payload, on_conflict="participant_id,slot_id")
            .execute()
        )
        rows = response.data or [payload]
        return Vote.from_record(rows[0])

    def list_for_event(self, event_id: str) -> List[Vote]:
        if not is_uuid(event_id):
            return []
        response = (
            self.gateway.table(self.table_name)
            .select("*")
            .eq("event_id", event_id)
            .execute()
        )
        return [Vote.from_record(record) for record in response.data or []]

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ...domain import Slot, SlotRange
from ..supabase import SupabaseGateway, is_uuid


@dataclass(slots=True)
class SlotRepository:
    gateway: SupabaseGateway
    table_name: str
    append_function: str

    def list_for_event(self, event_id: str) -> List[Slot]:
        if not is_uuid(event_id):
            return []
        response = (
            self.gateway.table(self.table_name)
            .select("*")
            .eq("event_id", event_id)
            .order("slot_index", desc=False)
            .execute()
        )
        return [Slot.from_record(record) for record in response.data or []]

    def fetch(self, slot_id: str) -> Optional[Slot]:
        if not is_uuid(slot_id):
            return None
        response = (
            self.gateway.table(self.table_name)
            .select("*")
            .eq("id", slot_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return Slot.from_record(rows[0]) if rows else None

    def fetch_in_event(self, slot_id: str, event_id: str) -> Optional[Slot]:
        if not (is_uuid(slot_id) and is_uuid(event_id)):
            return None
        response = (
            self.gateway.table(self.table_name)
            .select("*")
            .eq("id", slot_id)
            .eq("event_id", event_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return Slot.from_record(rows[0]) if rows else None

    def insert_many(self, rows: List[Dict[str, Any]]) -> List[Slot]:
        response = self.gateway.table(self.table_name).insert(rows).execute()
        records = response.data or rows
        return sorted((Slot.from_record(record) for record in records), key=lambda slot: slot.slot_index)

    def append(self, event_id: str, ranges: List[SlotRange]) -> List[Slot]:
        """Append slots after the event's current last index in one database call.

        The database function bumps ``events.next_slot_index`` with a single
        ``UPDATE ... RETURNING`` and inserts the rows in the same transaction, so
        concurrent appends on one event serialize on the event row. An empty
        result means the event does not exist.
        """

        if not is_uuid(event_id):
            return []
        payload = [
            {"start_at": item.start_at.isoformat(), "end_at": item.end_at.isoformat()}
            for item in ranges
        ]
        response = self.gateway.rpc(
            self.append_function,
            {"p_event_id": event_id, "p_slots": payload},
        ).execute()
        records = response.data or []
        return sorted((Slot.from_record(record) for record in records), key=lambda slot: slot.slot_index)

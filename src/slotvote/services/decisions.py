from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import uuid4

from ..domain import Capability, DecidedBy, Decision, InvalidInput
from .context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DecisionEngine:
    context: ServiceContext

    def decide(self, event_id: str, slot_id: str, acting_role: Capability | DecidedBy) -> Decision:
        """Append a decision for ``slot_id``; earlier decisions stay untouched."""

        if not slot_id:
            raise InvalidInput("slotId required")
        slot = self.context.slots.fetch_in_event(slot_id, event_id)
        if slot is None:
            raise InvalidInput("invalid slot")

        decided_by = acting_role if isinstance(acting_role, DecidedBy) else DecidedBy.from_capability(acting_role)
        decision = self.context.decisions.insert(
            Decision(
                id=str(uuid4()),
                event_id=event_id,
                slot_id=slot.id,
                decided_by=decided_by,
                decided_at=self.context.now(),
                ics_uid=str(uuid4()),
            )
        )
        logger.info("Event %s decided on slot %s by %s", event_id, slot.id, decided_by.value)
        return decision

    def current(self, event_id: str) -> Optional[Decision]:
        return self.context.decisions.latest(event_id)

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timezone
from typing import Iterable, List

from ..domain import InvalidInput, NotFound, Slot, SlotRange
from .context import ServiceContext

logger = logging.getLogger(__name__)


def validate_ranges(ranges: Iterable[SlotRange]) -> List[SlotRange]:
    """Check requested ranges and normalize them to UTC.

    Each bound must carry an explicit offset and the start must come strictly
    before the end.
    """

    validated: list[SlotRange] = []
    for position, item in enumerate(ranges):
        if item.start_at.tzinfo is None or item.end_at.tzinfo is None:
            raise InvalidInput(f"slots[{position}]: startAt and endAt must include a UTC offset")
        start = item.start_at.astimezone(timezone.utc)
        end = item.end_at.astimezone(timezone.utc)
        if start >= end:
            raise InvalidInput(f"slots[{position}]: startAt must be before endAt")
        validated.append(SlotRange(start_at=start, end_at=end))
    if not validated:
        raise InvalidInput("slots must contain at least one entry")
    return validated


@dataclass(slots=True)
class SlotAllocator:
    context: ServiceContext

    def add_slots(self, event_id: str, ranges: Iterable[SlotRange]) -> List[Slot]:
        validated = validate_ranges(ranges)
        slots = self.context.slots.append(event_id, validated)
        if not slots:
            raise NotFound("event not found")
        logger.info(
            "Appended %d slot(s) to event %s (indices %d-%d)",
            len(slots),
            event_id,
            slots[0].slot_index,
            slots[-1].slot_index,
        )
        return slots

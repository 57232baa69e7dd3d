from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from ..domain import Decision, Event, NotFound, Slot
from .context import ServiceContext
from .decisions import DecisionEngine

CALENDAR_CONTENT_TYPE = "text/calendar; charset=utf-8"


def to_ics_datetime(value: datetime) -> str:
    """Format as a UTC basic timestamp, ``YYYYMMDDTHHMMSSZ``."""

    return value.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def escape_text(value: str) -> str:
    # backslash and newline are escaped; comma, semicolon and CR are dropped
    escaped = value.replace("\\", "\\\\").replace("\n", "\\n")
    for character in (",", ";", "\r"):
        escaped = escaped.replace(character, "")
    return escaped


@dataclass(frozen=True)
class CalendarDocument:
    filename: str
    content: str
    content_type: str = CALENDAR_CONTENT_TYPE


@dataclass(slots=True)
class CalendarExporter:
    context: ServiceContext
    decisions: DecisionEngine

    def export_current_decision(self, event_id: str) -> CalendarDocument:
        decision = self.decisions.current(event_id)
        if decision is None:
            raise NotFound("no decision")
        event = self.context.events.fetch(event_id)
        slot = self.context.slots.fetch(decision.slot_id)
        if event is None or slot is None:
            raise NotFound("not found")
        return CalendarDocument(
            filename=f"event-{event.id}.ics",
            content=self.render(event, slot, decision),
        )

    def render(self, event: Event, slot: Slot, decision: Decision) -> str:
        site = self.context.settings.site
        link = site.event_url(event.id)
        description = "\n".join(part for part in (event.description, link) if part)
        uid = decision.ics_uid or f"{event.id}@{site.ics_uid_domain}"

        lines: List[Optional[str]] = [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            f"PRODID:{site.ics_prodid}",
            "CALSCALE:GREGORIAN",
            "METHOD:PUBLISH",
            "BEGIN:VEVENT",
            f"UID:{uid}",
            f"DTSTAMP:{to_ics_datetime(decision.decided_at)}",
            f"DTSTART:{to_ics_datetime(slot.start_at)}",
            f"DTEND:{to_ics_datetime(slot.end_at)}",
            f"SUMMARY:{escape_text(event.title)}",
            f"DESCRIPTION:{escape_text(description)}" if description else None,
            f"URL:{link}",
            f"LOCATION:{escape_text(event.location)}" if event.location else None,
            "END:VEVENT",
            "END:VCALENDAR",
        ]
        return "\r\n".join(line for line in lines if line)

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .enums import Choice, DecidedBy, Role

DEFAULT_TIMEZONE = "Asia/Tokyo"


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported datetime value: {value!r}")
    if parsed.tzinfo is None:
        # timestamptz columns always carry an offset; bare values are UTC
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _optional_datetime(value: Any) -> Optional[datetime]:
    return _parse_datetime(value) if value else None


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(slots=True)
class Event:
    id: str
    title: str
    duration_min: int
    timezone: str
    description: Optional[str] = None
    deadline_at: Optional[datetime] = None
    location: Optional[str] = None
    organizer_token: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Event":
        return cls(
            id=str(record["id"]),
            title=str(record["title"]),
            duration_min=int(record["duration_min"]),
            timezone=str(record.get("timezone") or DEFAULT_TIMEZONE),
            description=record.get("description"),
            deadline_at=_optional_datetime(record.get("deadline_at")),
            location=record.get("location"),
            organizer_token=record.get("organizer_token"),
            created_at=_optional_datetime(record.get("created_at")),
        )

    def is_published(self, now: datetime) -> bool:
        return self.deadline_at is None or self.deadline_at <= now


@dataclass(slots=True, frozen=True)
class SlotRange:
    """A requested candidate range, before an index is assigned."""

    start_at: datetime
    end_at: datetime


@dataclass(slots=True)
class Slot:
    id: str
    event_id: str
    start_at: datetime
    end_at: datetime
    slot_index: int

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Slot":
        return cls(
            id=str(record["id"]),
            event_id=str(record["event_id"]),
            start_at=_parse_datetime(record["start_at"]),
            end_at=_parse_datetime(record["end_at"]),
            slot_index=int(record["slot_index"]),
        )


@dataclass(slots=True)
class Participant:
    id: str
    event_id: str
    invite_token: str
    role: Role = Role.MEMBER
    name: Optional[str] = None
    email: Optional[str] = None
    invited_at: Optional[datetime] = None
    last_active_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Participant":
        raw_role = record.get("role")
        role = Role(raw_role) if raw_role in Role._value2member_map_ else Role.MEMBER
        return cls(
            id=str(record["id"]),
            event_id=str(record["event_id"]),
            invite_token=str(record.get("invite_token") or ""),
            role=role,
            name=record.get("name"),
            email=record.get("email"),
            invited_at=_optional_datetime(record.get("invited_at")),
            last_active_at=_optional_datetime(record.get("last_active_at")),
        )


@dataclass(slots=True)
class Vote:
    event_id: str
    participant_id: str
    slot_id: str
    choice: Choice
    comment: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Vote":
        return cls(
            event_id=str(record["event_id"]),
            participant_id=str(record["participant_id"]),
            slot_id=str(record["slot_id"]),
            choice=Choice(record["choice"]),
            comment=record.get("comment"),
            updated_at=_optional_datetime(record.get("updated_at")),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "participant_id": self.participant_id,
            "slot_id": self.slot_id,
            "choice": self.choice.value,
            "comment": self.comment,
            "updated_at": _iso(self.updated_at),
        }


@dataclass(slots=True)
class Decision:
    id: str
    event_id: str
    slot_id: str
    decided_by: DecidedBy
    decided_at: datetime
    ics_uid: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Decision":
        return cls(
            id=str(record["id"]),
            event_id=str(record["event_id"]),
            slot_id=str(record["slot_id"]),
            decided_by=DecidedBy(record.get("decided_by") or DecidedBy.ADMIN),
            decided_at=_parse_datetime(record["decided_at"]),
            ics_uid=record.get("ics_uid"),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "event_id": self.event_id,
            "slot_id": self.slot_id,
            "decided_by": self.decided_by.value,
            "decided_at": self.decided_at.isoformat(),
            "ics_uid": self.ics_uid,
        }


@dataclass(slots=True)
class RateLimitRecord:
    ip: str
    path: str
    created_at: datetime

    def to_record(self) -> Dict[str, Any]:
        return {"ip": self.ip, "path": self.path, "created_at": self.created_at.isoformat()}


@dataclass(slots=True, frozen=True)
class ParticipantSpec:
    """An invitee as requested at event creation, before a token is issued."""

    name: Optional[str] = None
    email: Optional[str] = None
    role: Role = Role.MEMBER

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from ..domain import DEFAULT_TIMEZONE, Choice, Event, Participant, ParticipantSpec, Role, Slot, SlotRange, Vote
from ..services.scoring import RankedSlot, SlotTally

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


# --- Requests -----------------------------------------------------------------


class SlotInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_at: AwareDatetime = Field(alias="startAt")
    end_at: AwareDatetime = Field(alias="endAt")

    def to_domain(self) -> SlotRange:
        return SlotRange(start_at=self.start_at, end_at=self.end_at)


class ParticipantInput(BaseModel):
    name: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    role: Role = Field(default=Role.MEMBER)

    def to_domain(self) -> ParticipantSpec:
        return ParticipantSpec(name=self.name, email=self.email, role=self.role)


class CreateEventRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    description: Optional[str] = Field(default=None)
    duration_min: int = Field(alias="durationMin", gt=0)
    timezone: str = Field(default=DEFAULT_TIMEZONE)
    deadline_at: Optional[AwareDatetime] = Field(default=None, alias="deadlineAt")
    location: Optional[str] = Field(default=None)
    slots: List[SlotInput] = Field(min_length=1)
    participants: List[ParticipantInput] = Field(min_length=1)


class AddSlotsRequest(BaseModel):
    slots: List[SlotInput] = Field(min_length=1)


class VoteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(min_length=1)
    slot_id: str = Field(alias="slotId", min_length=1)
    choice: Choice
    comment: Optional[str] = Field(default=None, max_length=1000)


class DecideRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    slot_id: Optional[str] = Field(default=None, alias="slotId")


# --- Payloads -----------------------------------------------------------------


class EventPayload(BaseModel):
    id: str
    title: str
    description: Optional[str] = Field(default=None)
    duration_min: int
    timezone: str
    deadline_at: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None)
    created_at: Optional[str] = Field(default=None)

    @classmethod
    def from_domain(cls, event: Event) -> "EventPayload":
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            duration_min=event.duration_min,
            timezone=event.timezone,
            deadline_at=_iso(event.deadline_at),
            location=event.location,
            created_at=_iso(event.created_at),
        )


class SlotPayload(BaseModel):
    id: str
    event_id: str
    start_at: str
    end_at: str
    slot_index: int

    @classmethod
    def from_domain(cls, slot: Slot) -> "SlotPayload":
        return cls(
            id=slot.id,
            event_id=slot.event_id,
            start_at=slot.start_at.isoformat(),
            end_at=slot.end_at.isoformat(),
            slot_index=slot.slot_index,
        )


class TallyPayload(BaseModel):
    yes: int = 0
    maybe: int = 0
    no: int = 0
    score: float = 0

    @classmethod
    def from_domain(cls, tally: SlotTally) -> "TallyPayload":
        return cls(yes=tally.yes, maybe=tally.maybe, no=tally.no, score=tally.score)


class RankedSlotPayload(SlotPayload):
    yes: int
    maybe: int
    no: int
    score: float

    @classmethod
    def from_ranked(cls, item: RankedSlot) -> "RankedSlotPayload":
        return cls(
            **SlotPayload.from_domain(item.slot).model_dump(),
            **TallyPayload.from_domain(item.tally).model_dump(),
        )


class ParticipantPayload(BaseModel):
    id: str
    name: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    role: str
    invited_at: Optional[str] = Field(default=None)
    last_active_at: Optional[str] = Field(default=None)

    @classmethod
    def from_domain(cls, participant: Participant) -> "ParticipantPayload":
        return cls(
            id=participant.id,
            name=participant.name,
            email=participant.email,
            role=participant.role.value,
            invited_at=_iso(participant.invited_at),
            last_active_at=_iso(participant.last_active_at),
        )


class VotePayload(BaseModel):
    participant_id: str
    slot_id: str
    choice: str
    comment: Optional[str] = Field(default=None)
    updated_at: Optional[str] = Field(default=None)

    @classmethod
    def from_domain(cls, vote: Vote) -> "VotePayload":
        return cls(
            participant_id=vote.participant_id,
            slot_id=vote.slot_id,
            choice=vote.choice.value,
            comment=vote.comment,
            updated_at=_iso(vote.updated_at),
        )


class InvitePayload(BaseModel):
    id: str
    name: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    role: str
    url: str


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None

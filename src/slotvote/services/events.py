from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence
from uuid import uuid4

from ..domain import (
    DEFAULT_TIMEZONE,
    Decision,
    Event,
    Forbidden,
    InvalidInput,
    NotFound,
    Participant,
    ParticipantSpec,
    Slot,
    SlotRange,
    Vote,
)
from .access import AccessControl
from .context import ServiceContext
from .decisions import DecisionEngine
from .scoring import RankedSlot, ScoreAggregator, SlotTally
from .slots import SlotAllocator, validate_ranges
from .throttle import CreateThrottle, ThrottleOutcome
from .tokens import new_invite_token, new_organizer_token, new_rotated_organizer_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Invite:
    participant: Participant
    url: str


@dataclass(frozen=True)
class CreatedEvent:
    event: Event
    slots: List[Slot]
    participants: List[Participant]
    invites: List[Invite]
    organizer_key: Optional[str]
    throttle: Optional[ThrottleOutcome] = None


@dataclass(frozen=True)
class OrganizerSummary:
    event: Event
    slots: List[Slot]
    participants: List[Participant]
    votes: List[Vote]
    counts: Dict[str, SlotTally]


@dataclass(frozen=True)
class RankedSummary:
    event: Event
    ranked: List[RankedSlot]


@dataclass(frozen=True)
class PublicSummary:
    event: Event
    slots: List[Slot]
    counts: Dict[str, SlotTally]


@dataclass(frozen=True)
class InviteList:
    event: Event
    invites: List[Invite]


@dataclass(slots=True)
class EventService:
    """Event lifecycle operations that span several tables."""

    context: ServiceContext
    access: AccessControl
    throttle: CreateThrottle
    scoring: ScoreAggregator
    allocator: SlotAllocator
    decisions: DecisionEngine

    def _require_event(self, event_id: str) -> Event:
        event = self.context.events.fetch(event_id)
        if event is None:
            raise NotFound("event not found")
        return event

    def _invite(self, participant: Participant) -> Invite:
        url = self.context.settings.site.invite_url(participant.event_id, participant.invite_token)
        return Invite(participant=participant, url=url)

    def create_event(
        self,
        *,
        title: str,
        duration_min: int,
        slots: Sequence[SlotRange],
        participants: Sequence[ParticipantSpec],
        timezone_name: str = DEFAULT_TIMEZONE,
        description: Optional[str] = None,
        deadline_at: Optional[datetime] = None,
        location: Optional[str] = None,
        admin_credential: Optional[str] = None,
        origin: str = "unknown",
    ) -> CreatedEvent:
        """Create an event with its slots and invitees.

        The three inserts (event, slots, participants) are independent calls; a
        failure after the first leaves a partially created event behind.
        """

        public_create = self.context.settings.access.public_create
        self.access.require_create_permission(admin_credential, public_create)

        if not title or not title.strip():
            raise InvalidInput("title must not be empty")
        if duration_min <= 0:
            raise InvalidInput("durationMin must be a positive integer")
        ranges = validate_ranges(slots)
        if not participants:
            raise InvalidInput("participants must contain at least one entry")
        if deadline_at is not None and deadline_at.tzinfo is None:
            raise InvalidInput("deadlineAt must include a UTC offset")

        outcome: Optional[ThrottleOutcome] = None
        if public_create:
            outcome = self.throttle.check_and_record(origin)

        now = self.context.now()
        event = self.context.events.insert(
            {
                "id": str(uuid4()),
                "title": title,
                "description": description or None,
                "duration_min": duration_min,
                "timezone": timezone_name or DEFAULT_TIMEZONE,
                "deadline_at": deadline_at.astimezone(timezone.utc).isoformat() if deadline_at else None,
                "location": location or None,
                "organizer_token": new_organizer_token(),
                "next_slot_index": len(ranges),
                "created_at": now.isoformat(),
            }
        )

        created_slots = self.context.slots.insert_many(
            [
                {
                    "id": str(uuid4()),
                    "event_id": event.id,
                    "start_at": item.start_at.isoformat(),
                    "end_at": item.end_at.isoformat(),
                    "slot_index": index,
                }
                for index, item in enumerate(ranges)
            ]
        )

        created_participants = self.context.participants.insert_many(
            [
                {
                    "id": str(uuid4()),
                    "event_id": event.id,
                    "name": invitee.name or None,
                    "email": invitee.email or None,
                    "role": invitee.role.value,
                    "invite_token": new_invite_token(),
                    "invited_at": now.isoformat(),
                }
                for invitee in participants
            ]
        )

        logger.info(
            "Created event %s with %d slot(s) and %d participant(s)",
            event.id,
            len(created_slots),
            len(created_participants),
        )
        return CreatedEvent(
            event=event,
            slots=created_slots,
            participants=created_participants,
            invites=[self._invite(participant) for participant in created_participants],
            organizer_key=event.organizer_token,
            throttle=outcome,
        )

    def organizer_summary(
        self,
        event_id: str,
        *,
        admin_credential: Optional[str] = None,
        organizer_credential: Optional[str] = None,
    ) -> OrganizerSummary:
        self.access.require_organizer_or_admin(admin_credential, organizer_credential, event_id)
        event = self._require_event(event_id)
        slots = self.context.slots.list_for_event(event_id)
        participants = self.context.participants.list_for_event(event_id)
        votes = self.context.votes.list_for_event(event_id)
        return OrganizerSummary(
            event=event,
            slots=slots,
            participants=participants,
            votes=votes,
            counts=self.scoring.unweighted(slots, votes),
        )

    def ranked_summary(self, event_id: str) -> RankedSummary:
        event = self._require_event(event_id)
        slots = self.context.slots.list_for_event(event_id)
        participants = self.context.participants.list_for_event(event_id)
        votes = self.context.votes.list_for_event(event_id)
        tallies = self.scoring.role_weighted(slots, votes, participants)
        return RankedSummary(event=event, ranked=self.scoring.rank(slots, tallies))

    def public_summary(self, event_id: str) -> PublicSummary:
        event = self._require_event(event_id)
        if not event.is_published(self.context.now()):
            raise Forbidden("Results are not published until the response deadline.")
        slots = self.context.slots.list_for_event(event_id)
        votes = self.context.votes.list_for_event(event_id)
        return PublicSummary(event=event, slots=slots, counts=self.scoring.unweighted(slots, votes))

    def list_invites(
        self,
        event_id: str,
        *,
        admin_credential: Optional[str] = None,
        organizer_credential: Optional[str] = None,
    ) -> InviteList:
        self.access.require_organizer_or_admin(admin_credential, organizer_credential, event_id)
        event = self._require_event(event_id)
        participants = self.context.participants.list_for_event(event_id, order_by="role", desc=True)
        return InviteList(event=event, invites=[self._invite(participant) for participant in participants])

    def rotate_organizer_key(
        self,
        event_id: str,
        *,
        admin_credential: Optional[str] = None,
        organizer_credential: Optional[str] = None,
    ) -> str:
        capability = self.access.require_organizer_or_admin(admin_credential, organizer_credential, event_id)
        rotated = self.context.events.replace_organizer_token(event_id, new_rotated_organizer_token())
        if rotated is None:
            raise NotFound("event not found")
        logger.info("Rotated organizer key for event %s (by %s)", event_id, capability.name.lower())
        return rotated

    def add_slots(
        self,
        event_id: str,
        ranges: Sequence[SlotRange],
        *,
        admin_credential: Optional[str] = None,
        organizer_credential: Optional[str] = None,
    ) -> List[Slot]:
        self.access.require_organizer_or_admin(admin_credential, organizer_credential, event_id)
        return self.allocator.add_slots(event_id, ranges)

    def decide(
        self,
        event_id: str,
        slot_id: str,
        *,
        admin_credential: Optional[str] = None,
        organizer_credential: Optional[str] = None,
    ) -> Decision:
        capability = self.access.require_organizer_or_admin(admin_credential, organizer_credential, event_id)
        return self.decisions.decide(event_id, slot_id, capability)

from __future__ import annotations

from typing import Any, Dict, Mapping

from ..domain import Event, Participant, Slot, Vote
from ..services.events import CreatedEvent, Invite, InviteList, OrganizerSummary, PublicSummary, RankedSummary
from ..services.scoring import SlotTally
from .models import (
    EventPayload,
    InvitePayload,
    ParticipantPayload,
    RankedSlotPayload,
    SlotPayload,
    TallyPayload,
    VotePayload,
)


def serialize_event(event: Event) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump()


def serialize_slot(slot: Slot) -> Dict[str, Any]:
    return SlotPayload.from_domain(slot).model_dump()


def serialize_participant(participant: Participant) -> Dict[str, Any]:
    return ParticipantPayload.from_domain(participant).model_dump()


def serialize_vote(vote: Vote) -> Dict[str, Any]:
    return VotePayload.from_domain(vote).model_dump()


def serialize_invite(invite: Invite) -> Dict[str, Any]:
    participant = invite.participant
    return InvitePayload(
        id=participant.id,
        name=participant.name,
        email=participant.email,
        role=participant.role.value,
        url=invite.url,
    ).model_dump()


def serialize_counts(counts: Mapping[str, SlotTally]) -> Dict[str, Dict[str, Any]]:
    return {slot_id: TallyPayload.from_domain(tally).model_dump() for slot_id, tally in counts.items()}


def serialize_created_event(result: CreatedEvent) -> Dict[str, Any]:
    return {
        "event": serialize_event(result.event),
        "slots": [serialize_slot(slot) for slot in result.slots],
        "participants": [serialize_participant(participant) for participant in result.participants],
        "invites": [serialize_invite(invite) for invite in result.invites],
        "organizerKey": result.organizer_key,
    }


def serialize_organizer_summary(summary: OrganizerSummary) -> Dict[str, Any]:
    return {
        "event": serialize_event(summary.event),
        "slots": [serialize_slot(slot) for slot in summary.slots],
        "participants": [serialize_participant(participant) for participant in summary.participants],
        "votes": [serialize_vote(vote) for vote in summary.votes],
        "counts": serialize_counts(summary.counts),
    }


def serialize_ranked_summary(summary: RankedSummary) -> Dict[str, Any]:
    return {
        "event": serialize_event(summary.event),
        "slots": [RankedSlotPayload.from_ranked(item).model_dump() for item in summary.ranked],
    }


def serialize_public_summary(summary: PublicSummary) -> Dict[str, Any]:
    return {
        "event": serialize_event(summary.event),
        "slots": [serialize_slot(slot) for slot in summary.slots],
        "counts": serialize_counts(summary.counts),
    }


def serialize_invite_list(result: InviteList) -> Dict[str, Any]:
    return {
        "event": serialize_event(result.event),
        "invites": [serialize_invite(invite) for invite in result.invites],
    }

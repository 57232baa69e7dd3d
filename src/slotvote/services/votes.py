from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..domain import Choice, InvalidInput, Vote
from .access import AccessControl
from .context import ServiceContext

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 1000


def _parse_choice(choice: Choice | str) -> Choice:
    try:
        return Choice(choice)
    except ValueError as exc:
        raise InvalidInput("choice must be one of yes, maybe, no") from exc


@dataclass(slots=True)
class VoteLedger:
    """Keeps one standing choice per (participant, slot) pair."""

    context: ServiceContext
    access: AccessControl

    def cast_vote(
        self,
        event_id: str,
        participant_token: object,
        slot_id: str,
        choice: Choice | str,
        comment: Optional[str] = None,
    ) -> Vote:
        participant = self.access.authenticate_participant(participant_token, event_id)
        parsed_choice = _parse_choice(choice)
        if comment is not None and len(comment) > MAX_COMMENT_LENGTH:
            raise InvalidInput(f"comment must be at most {MAX_COMMENT_LENGTH} characters")

        slot = self.context.slots.fetch_in_event(slot_id, event_id)
        if slot is None:
            raise InvalidInput("invalid slot")

        now = self.context.now()
        vote = self.context.votes.upsert(
            Vote(
                event_id=event_id,
                participant_id=participant.id,
                slot_id=slot.id,
                choice=parsed_choice,
                comment=comment or None,
                updated_at=now,
            )
        )
        self.context.participants.touch(participant.id, now)
        logger.debug("Recorded %s for participant %s on slot %s", parsed_choice.value, participant.id, slot.id)
        return vote

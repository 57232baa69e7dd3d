"""Per-slot tallies and rankings computed from the current vote rows.

Two modes are kept side by side. The unweighted mode backs the anonymous
and organizer "current standing" views; the role-weighted mode backs the
organizer ranking. Nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..domain import Choice, Participant, Role, Slot, Vote

CHOICE_WEIGHTS: Mapping[Choice, int] = {Choice.YES: 2, Choice.MAYBE: 1, Choice.NO: 0}
ROLE_WEIGHTS: Mapping[Role, float] = {Role.MUST: 2.0, Role.MEMBER: 1.0, Role.OPTIONAL: 0.5}


def choice_weight(choice: Choice) -> int:
    return CHOICE_WEIGHTS[choice]


def role_weight(role: Optional[Role]) -> float:
    return ROLE_WEIGHTS.get(role or Role.MEMBER, ROLE_WEIGHTS[Role.MEMBER])


@dataclass(slots=True)
class SlotTally:
    yes: int = 0
    maybe: int = 0
    no: int = 0
    score: float = 0

    def add(self, choice: Choice, weight: float = 1.0) -> None:
        if choice is Choice.YES:
            self.yes += 1
        elif choice is Choice.MAYBE:
            self.maybe += 1
        else:
            self.no += 1
        self.score += weight * choice_weight(choice)

    def as_dict(self) -> Dict[str, float]:
        return {"yes": self.yes, "maybe": self.maybe, "no": self.no, "score": self.score}


@dataclass(slots=True)
class RankedSlot:
    slot: Slot
    tally: SlotTally


class ScoreAggregator:
    def unweighted(self, slots: Iterable[Slot], votes: Iterable[Vote]) -> Dict[str, SlotTally]:
        tallies = {slot.id: SlotTally() for slot in slots}
        for vote in votes:
            tally = tallies.get(vote.slot_id)
            if tally is None:
                continue
            tally.add(vote.choice)
        for tally in tallies.values():
            tally.score = int(tally.score)
        return tallies

    def role_weighted(
        self,
        slots: Iterable[Slot],
        votes: Iterable[Vote],
        participants: Iterable[Participant],
    ) -> Dict[str, SlotTally]:
        roles = {participant.id: participant.role for participant in participants}
        tallies = {slot.id: SlotTally(score=0.0) for slot in slots}
        for vote in votes:
            tally = tallies.get(vote.slot_id)
            if tally is None:
                continue
            tally.add(vote.choice, role_weight(roles.get(vote.participant_id)))
        return tallies

    def rank(self, slots: Sequence[Slot], tallies: Mapping[str, SlotTally]) -> List[RankedSlot]:
        """Order by score desc, then yes count desc, then start time asc."""

        ranked = [RankedSlot(slot=slot, tally=tallies.get(slot.id) or SlotTally()) for slot in slots]
        ranked.sort(
            key=lambda item: (
                -item.tally.score,
                -item.tally.yes,
                item.slot.start_at,
                item.slot.slot_index,
            )
        )
        return ranked

    def top(self, slots: Sequence[Slot], tallies: Mapping[str, SlotTally], n: int) -> List[RankedSlot]:
        return self.rank(slots, tallies)[: max(n, 0)]

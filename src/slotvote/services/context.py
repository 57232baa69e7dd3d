from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from ..config import AppSettings, get_settings
from ..data import SupabaseGateway
from ..data.repositories import (
    DecisionRepository,
    EventRepository,
    ParticipantRepository,
    RateLimitRepository,
    SlotRepository,
    VoteRepository,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root for services to share settings, gateway, repositories and the clock."""

    settings: AppSettings = field(default_factory=get_settings)
    gateway: Optional[SupabaseGateway] = None
    clock: Callable[[], datetime] = utcnow
    events: EventRepository = field(init=False)
    slots: SlotRepository = field(init=False)
    participants: ParticipantRepository = field(init=False)
    votes: VoteRepository = field(init=False)
    decisions: DecisionRepository = field(init=False)
    rate_limits: RateLimitRepository = field(init=False)

    def __post_init__(self) -> None:
        if self.gateway is None:
            self.gateway = SupabaseGateway(self.settings.supabase)
        storage = self.settings.storage
        self.events = EventRepository(gateway=self.gateway, table_name=storage.events_table)
        self.slots = SlotRepository(
            gateway=self.gateway,
            table_name=storage.slots_table,
            append_function=storage.append_slots_function,
        )
        self.participants = ParticipantRepository(gateway=self.gateway, table_name=storage.participants_table)
        self.votes = VoteRepository(gateway=self.gateway, table_name=storage.votes_table)
        self.decisions = DecisionRepository(gateway=self.gateway, table_name=storage.decisions_table)
        self.rate_limits = RateLimitRepository(gateway=self.gateway, table_name=storage.rate_limits_table)

    def now(self) -> datetime:
        return self.clock()

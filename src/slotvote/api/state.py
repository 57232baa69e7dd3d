from __future__ import annotations

from dataclasses import dataclass, field

from ..services import (
    AccessControl,
    CalendarExporter,
    CreateThrottle,
    DecisionEngine,
    EventService,
    ScoreAggregator,
    ServiceContext,
    SlotAllocator,
    VoteLedger,
)


@dataclass(slots=True)
class ApiState:
    """Service graph for one process, built around an explicitly supplied context."""

    context: ServiceContext = field(default_factory=ServiceContext)
    access: AccessControl = field(init=False)
    throttle: CreateThrottle = field(init=False)
    scoring: ScoreAggregator = field(init=False)
    slots: SlotAllocator = field(init=False)
    votes: VoteLedger = field(init=False)
    decisions: DecisionEngine = field(init=False)
    calendar: CalendarExporter = field(init=False)
    events: EventService = field(init=False)

    def __post_init__(self) -> None:
        self.access = AccessControl(self.context)
        self.throttle = CreateThrottle(self.context)
        self.scoring = ScoreAggregator()
        self.slots = SlotAllocator(self.context)
        self.votes = VoteLedger(self.context, self.access)
        self.decisions = DecisionEngine(self.context)
        self.calendar = CalendarExporter(self.context, self.decisions)
        self.events = EventService(
            context=self.context,
            access=self.access,
            throttle=self.throttle,
            scoring=self.scoring,
            allocator=self.slots,
            decisions=self.decisions,
        )

"""Application services orchestrating data access and domain logic."""

from __future__ import annotations

from .access import AccessControl, extract_token
from .calendar import CalendarDocument, CalendarExporter
from .context import ServiceContext
from .decisions import DecisionEngine
from .events import EventService
from .scoring import ScoreAggregator, SlotTally
from .slots import SlotAllocator
from .throttle import CreateThrottle, ThrottleOutcome
from .votes import VoteLedger

__all__ = [
    "AccessControl",
    "CalendarDocument",
    "CalendarExporter",
    "CreateThrottle",
    "DecisionEngine",
    "EventService",
    "ScoreAggregator",
    "ServiceContext",
    "SlotAllocator",
    "SlotTally",
    "ThrottleOutcome",
    "VoteLedger",
    "extract_token",
]

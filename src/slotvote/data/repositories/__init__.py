"""Supabase repositories for first-class domain objects."""

from __future__ import annotations

from .decisions import DecisionRepository
from .events import EventRepository
from .participants import ParticipantRepository
from .rate_limits import RateLimitRepository
from .slots import SlotRepository
from .votes import VoteRepository

__all__ = [
    "DecisionRepository",
    "EventRepository",
    "ParticipantRepository",
    "RateLimitRepository",
    "SlotRepository",
    "VoteRepository",
]

"""Domain models for group scheduling polls."""

from __future__ import annotations

from .enums import Capability, Choice, DecidedBy, Role
from .errors import (
    Forbidden,
    InternalError,
    InvalidInput,
    NotFound,
    RateLimited,
    SchedulingError,
    Unauthorized,
)
from .models import (
    DEFAULT_TIMEZONE,
    Decision,
    Event,
    Participant,
    ParticipantSpec,
    RateLimitRecord,
    Slot,
    SlotRange,
    Vote,
)

__all__ = [
    "Capability",
    "Choice",
    "DecidedBy",
    "DEFAULT_TIMEZONE",
    "Decision",
    "Event",
    "Forbidden",
    "InternalError",
    "InvalidInput",
    "NotFound",
    "Participant",
    "ParticipantSpec",
    "RateLimitRecord",
    "RateLimited",
    "Role",
    "SchedulingError",
    "Slot",
    "SlotRange",
    "Unauthorized",
    "Vote",
]

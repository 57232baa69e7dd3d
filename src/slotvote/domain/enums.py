from __future__ import annotations

from enum import Enum, IntEnum


class Choice(str, Enum):
    YES = "yes"
    MAYBE = "maybe"
    NO = "no"


class Role(str, Enum):
    MUST = "must"
    MEMBER = "member"
    OPTIONAL = "optional"


class Capability(IntEnum):
    """Access tiers, least to most privileged."""

    PUBLIC = 0
    PARTICIPANT = 1
    ORGANIZER = 2
    ADMIN = 3


class DecidedBy(str, Enum):
    ORGANIZER = "organizer"
    ADMIN = "admin"

    @classmethod
    def from_capability(cls, capability: Capability) -> "DecidedBy":
        return cls.ADMIN if capability >= Capability.ADMIN else cls.ORGANIZER

"""slotvote: group scheduling polls with invite-token voting and calendar export."""

from __future__ import annotations

from .cli import main as main

__all__ = ["main"]

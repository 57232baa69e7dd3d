"""Request models, response serializers and the per-process service graph."""

from __future__ import annotations

from .state import ApiState

__all__ = ["ApiState"]

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from httpx import HTTPError
from postgrest.exceptions import APIError

from ..domain import RateLimited, RateLimitRecord
from .context import ServiceContext

logger = logging.getLogger(__name__)

# Failures of the auxiliary rate-limit table: PostgREST errors (missing table,
# row-level security) and transport errors reaching the store.
STORE_FAILURES = (APIError, HTTPError)


class ThrottleOutcome(str, Enum):
    ALLOWED = "allowed"
    SKIPPED = "skipped"


@dataclass(slots=True)
class CreateThrottle:
    """Limits anonymous event creation per origin address.

    A store failure while counting yields ``ThrottleOutcome.SKIPPED`` and the
    creation goes through unthrottled.
    """

    context: ServiceContext

    def check_and_record(self, origin_address: str) -> ThrottleOutcome:
        settings = self.context.settings.throttle
        now = self.context.now()
        ip = origin_address or "unknown"
        try:
            recent = self.context.rate_limits.count_since(ip, settings.path, now - settings.window)
        except STORE_FAILURES as exc:
            logger.warning("Create throttle skipped for %s: %s", ip, exc)
            return ThrottleOutcome.SKIPPED

        if recent >= settings.limit:
            logger.info("Create throttle tripped for %s (%d in window)", ip, recent)
            raise RateLimited()

        try:
            self.context.rate_limits.record(RateLimitRecord(ip=ip, path=settings.path, created_at=now))
        except STORE_FAILURES as exc:
            logger.warning("Could not record create attempt for %s: %s", ip, exc)
        return ThrottleOutcome.ALLOWED

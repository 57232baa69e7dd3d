from __future__ import annotations

import hmac
import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..domain import Capability, Participant, Unauthorized
from .context import ServiceContext

logger = logging.getLogger(__name__)

_TOKEN_RUN = re.compile(r"[A-Za-z0-9]+")


def extract_token(raw: object) -> Optional[str]:
    """Return the first alphanumeric run of ``raw``.

    Invite links are often pasted with a name or URL around them, e.g.
    ``"abc123 Yamada: https://..."`` yields ``"abc123"``.
    """

    if not isinstance(raw, str):
        return None
    match = _TOKEN_RUN.search(raw)
    return match.group(0) if match else None


def _matches(presented: Optional[str], expected: Optional[str]) -> bool:
    if not presented or not expected:
        return False
    return hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


@dataclass(slots=True)
class AccessControl:
    """Evaluates presented credentials against the capability an operation needs.

    Every failure raises the same :class:`Unauthorized`; the specific rule that
    rejected a caller is only visible in debug logs.
    """

    context: ServiceContext

    @property
    def _admin_secret(self) -> Optional[str]:
        return self.context.settings.access.admin_secret

    def require_admin(self, credential: Optional[str]) -> Capability:
        if not _matches(credential, self._admin_secret):
            logger.debug("Admin check failed")
            raise Unauthorized()
        return Capability.ADMIN

    def require_create_permission(self, credential: Optional[str], public_create_enabled: bool) -> Capability:
        if public_create_enabled:
            return Capability.ADMIN if _matches(credential, self._admin_secret) else Capability.PUBLIC
        return self.require_admin(credential)

    def require_organizer_or_admin(
        self,
        admin_credential: Optional[str],
        organizer_credential: Optional[str],
        event_id: str,
    ) -> Capability:
        if _matches(admin_credential, self._admin_secret):
            return Capability.ADMIN
        if not organizer_credential:
            logger.debug("Organizer check failed for event %s: no credential", event_id)
            raise Unauthorized()
        current = self.context.events.organizer_token(event_id)
        if not _matches(organizer_credential, current):
            logger.debug("Organizer check failed for event %s", event_id)
            raise Unauthorized()
        return Capability.ORGANIZER

    def authenticate_participant(self, raw_token: object, event_id: str) -> Participant:
        token = extract_token(raw_token)
        if not token:
            logger.debug("Participant check failed for event %s: unreadable token", event_id)
            raise Unauthorized()
        participant = self.context.participants.find_by_invite_token(event_id, token)
        if participant is None:
            logger.debug("Participant check failed for event %s", event_id)
            raise Unauthorized()
        return participant

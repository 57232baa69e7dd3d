from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
from uuid import UUID

from supabase import Client, create_client

from ..config.settings import SupabaseSettings


class SupabaseNotInitializedError(RuntimeError):
    """Raised when the store is used without a URL and service role key."""


def is_uuid(value: object) -> bool:
    """Whether ``value`` can be compared against a ``uuid`` column.

    PostgREST rejects anything else with a 22P02 cast error, so repositories
    treat a malformed id as a missing row instead of querying.
    """

    if not isinstance(value, str):
        return False
    try:
        UUID(value)
    except ValueError:
        return False
    return True


@dataclass
class SupabaseGateway:
    """Thin wrapper around a service-role Supabase client.

    One gateway is built by the process entry point and handed to every
    repository; nothing in the package keeps a module-level client.
    """

    settings: SupabaseSettings
    _client: Optional[Client] = None

    @classmethod
    def with_client(cls, settings: SupabaseSettings, client: Any) -> "SupabaseGateway":
        return cls(settings=settings, _client=client)

    def ensure_client(self) -> Client:
        if self._client is not None:
            return self._client
        if not self.settings.is_configured:
            missing = ", ".join(self.settings.missing_env_vars)
            raise SupabaseNotInitializedError(f"Supabase settings are incomplete: {missing}")
        self._client = create_client(self.settings.url, self.settings.service_role_key)
        return self._client

    def table(self, name: str):
        return self.ensure_client().table(name)

    def rpc(self, function: str, params: Dict[str, Any]):
        return self.ensure_client().rpc(function, params)

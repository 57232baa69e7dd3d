from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from platformdirs import user_log_dir

load_dotenv()

APP_NAME = "slotvote"


@dataclass(frozen=True)
class SupabaseSettings:
    url: Optional[str]
    service_role_key: Optional[str]

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.service_role_key)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.url:
            missing.append("SUPABASE_URL")
        if not self.service_role_key:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        return missing


@dataclass(frozen=True)
class AccessSettings:
    admin_secret: Optional[str]
    public_create: bool


@dataclass(frozen=True)
class SiteSettings:
    base_url: str
    ics_prodid: str
    ics_uid_domain: str

    def event_url(self, event_id: str) -> str:
        return f"{self.base_url.rstrip('/')}/event/{event_id}"

    def invite_url(self, event_id: str, invite_token: str) -> str:
        return f"{self.event_url(event_id)}?t={invite_token}"


@dataclass(frozen=True)
class ThrottleSettings:
    limit: int
    window: timedelta
    path: str


@dataclass(frozen=True)
class StorageSettings:
    events_table: str
    slots_table: str
    participants_table: str
    votes_table: str
    decisions_table: str
    rate_limits_table: str
    append_slots_function: str


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    directory: Path


@dataclass(frozen=True)
class AppSettings:
    supabase: SupabaseSettings
    access: AccessSettings
    site: SiteSettings
    throttle: ThrottleSettings
    storage: StorageSettings
    logging: LoggingSettings = field(
        default_factory=lambda: LoggingSettings(level="INFO", directory=Path(user_log_dir(APP_NAME)))
    )


def _flag_from_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() == "true"


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    supabase = SupabaseSettings(
        url=os.getenv("SUPABASE_URL"),
        service_role_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY"),
    )

    access = AccessSettings(
        admin_secret=os.getenv("ADMIN_SECRET") or None,
        public_create=_flag_from_env("PUBLIC_CREATE"),
    )

    site = SiteSettings(
        base_url=os.getenv("SITE_URL", "http://localhost:3000"),
        ics_prodid=os.getenv("ICS_PRODID", "-//slotvote//EN"),
        ics_uid_domain=os.getenv("ICS_UID_DOMAIN", "slotvote"),
    )

    throttle = ThrottleSettings(
        limit=_int_from_env("SLOTVOTE_CREATE_LIMIT", 5),
        window=timedelta(minutes=_int_from_env("SLOTVOTE_CREATE_WINDOW_MINUTES", 60)),
        path=os.getenv("SLOTVOTE_CREATE_PATH", "/api/events/create"),
    )

    storage = StorageSettings(
        events_table=os.getenv("SLOTVOTE_EVENTS_TABLE", "events"),
        slots_table=os.getenv("SLOTVOTE_SLOTS_TABLE", "event_slots"),
        participants_table=os.getenv("SLOTVOTE_PARTICIPANTS_TABLE", "participants"),
        votes_table=os.getenv("SLOTVOTE_VOTES_TABLE", "votes"),
        decisions_table=os.getenv("SLOTVOTE_DECISIONS_TABLE", "decisions"),
        rate_limits_table=os.getenv("SLOTVOTE_RATE_LIMITS_TABLE", "rate_limits"),
        append_slots_function=os.getenv("SLOTVOTE_APPEND_SLOTS_FUNCTION", "append_event_slots"),
    )

    logging_settings = LoggingSettings(
        level=os.getenv("SLOTVOTE_LOG_LEVEL", "INFO").upper(),
        directory=Path(os.getenv("SLOTVOTE_LOG_DIR") or user_log_dir(APP_NAME)),
    )

    return AppSettings(
        supabase=supabase,
        access=access,
        site=site,
        throttle=throttle,
        storage=storage,
        logging=logging_settings,
    )

"""
Tests for config/settings.py, the record mapping in domain/models.py and
the id format check in data/supabase.py
"""

import os
import unittest
from datetime import timedelta, timezone
from unittest import mock

from slotvote.config import get_settings
from slotvote.data import is_uuid
from slotvote.domain import DEFAULT_TIMEZONE, Event, Participant, Role, Slot

from tests.fakes import utc


class TestSettingsFromEnvironment(unittest.TestCase):
    def setUp(self):
        get_settings.cache_clear()
        self.addCleanup(get_settings.cache_clear)

    def test_overrides(self):
        env = {
            "SUPABASE_URL": "https://project.supabase.co",
            "SUPABASE_SERVICE_ROLE_KEY": "service",
            "ADMIN_SECRET": "s3cret",
            "PUBLIC_CREATE": "TRUE",
            "SITE_URL": "https://polls.example/",
            "SLOTVOTE_CREATE_LIMIT": "3",
            "SLOTVOTE_CREATE_WINDOW_MINUTES": "15",
            "SLOTVOTE_LOG_LEVEL": "debug",
        }
        with mock.patch.dict(os.environ, env):
            settings = get_settings()

        self.assertTrue(settings.supabase.is_configured)
        self.assertEqual(settings.access.admin_secret, "s3cret")
        self.assertTrue(settings.access.public_create)
        self.assertEqual(settings.throttle.limit, 3)
        self.assertEqual(settings.throttle.window, timedelta(minutes=15))
        self.assertEqual(settings.logging.level, "DEBUG")
        self.assertEqual(settings.site.invite_url("ev1", "tok"), "https://polls.example/event/ev1?t=tok")

    def test_defaults(self):
        cleared = {
            "SUPABASE_URL": "",
            "SUPABASE_SERVICE_ROLE_KEY": "",
            "ADMIN_SECRET": "",
            "PUBLIC_CREATE": "yes",
            "SLOTVOTE_CREATE_LIMIT": "many",
        }
        with mock.patch.dict(os.environ, cleared):
            settings = get_settings()

        self.assertFalse(settings.supabase.is_configured)
        self.assertEqual(
            set(settings.supabase.missing_env_vars),
            {"SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"},
        )
        self.assertIsNone(settings.access.admin_secret)
        self.assertFalse(settings.access.public_create)
        self.assertEqual(settings.throttle.limit, 5)
        self.assertEqual(settings.storage.append_slots_function, "append_event_slots")


class TestRecordMapping(unittest.TestCase):
    def test_event_timestamps_are_utc(self):
        event = Event.from_record(
            {
                "id": "ev",
                "title": "Standup",
                "duration_min": "30",
                "timezone": "Asia/Tokyo",
                "deadline_at": "2026-10-30T21:00:00+09:00",
                "created_at": "2026-10-19T09:00:00Z",
            }
        )
        self.assertEqual(event.duration_min, 30)
        self.assertEqual(event.deadline_at, utc(2026, 10, 30, 12))
        self.assertEqual(event.created_at.tzinfo, timezone.utc)
        self.assertFalse(event.is_published(utc(2026, 10, 30, 11)))
        self.assertTrue(event.is_published(utc(2026, 10, 30, 12)))

    def test_participant_with_unknown_role_counts_as_member(self):
        participant = Participant.from_record({"id": "p", "event_id": "ev", "invite_token": "abc", "role": "boss"})
        self.assertEqual(participant.role, Role.MEMBER)

    def test_slot_timestamps_are_utc(self):
        slot = Slot.from_record(
            {
                "id": "s",
                "event_id": "ev",
                "start_at": "2026-11-02T19:00:00+09:00",
                "end_at": "2026-11-02T11:00:00Z",
                "slot_index": "4",
            }
        )
        self.assertEqual(slot.slot_index, 4)
        self.assertEqual(slot.start_at, utc(2026, 11, 2, 10))
        self.assertEqual(slot.end_at, utc(2026, 11, 2, 11))

    def test_event_without_timezone_uses_default(self):
        event = Event.from_record({"id": "ev", "title": "Standup", "duration_min": 30, "timezone": None})
        self.assertEqual(event.timezone, DEFAULT_TIMEZONE)
        self.assertEqual(DEFAULT_TIMEZONE, "Asia/Tokyo")


class TestIdFormat(unittest.TestCase):
    def test_uuid_strings(self):
        self.assertTrue(is_uuid("0b6f3c1e-6a53-4d8e-9a57-2f0c9a1d5e11"))
        self.assertTrue(is_uuid("0B6F3C1E-6A53-4D8E-9A57-2F0C9A1D5E11"))

    def test_malformed_values(self):
        for value in ("slot-1", "", "not-a-uuid", "0b6f3c1e-6a53-4d8e-9a57", None, 42):
            with self.subTest(value=value):
                self.assertFalse(is_uuid(value))

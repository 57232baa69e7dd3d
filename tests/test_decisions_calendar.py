"""
Tests for services/decisions.py and services/calendar.py

Decisions are append-only; the export always reflects the latest one.
"""

import unittest

from slotvote.domain import DecidedBy, InvalidInput, NotFound, Unauthorized
from slotvote.services.calendar import CALENDAR_CONTENT_TYPE, escape_text, to_ics_datetime

from tests.fakes import ADMIN_SECRET, SITE_URL, FakeSupabase, FrozenClock, create_sample_event, make_state, utc


class TestDecisionEngine(unittest.TestCase):
    def setUp(self):
        self.store = FakeSupabase()
        self.clock = FrozenClock()
        self.state = make_state(self.store, clock=self.clock)
        self.created = create_sample_event(self.state)
        self.event_id = self.created.event.id

    def test_decisions_are_appended(self):
        first = self.state.events.decide(
            self.event_id,
            self.created.slots[0].id,
            organizer_credential=self.created.organizer_key,
        )
        self.clock.advance(minutes=10)
        second = self.state.events.decide(self.event_id, self.created.slots[2].id, admin_credential=ADMIN_SECRET)

        history = self.state.context.decisions.list_for_event(self.event_id)
        self.assertEqual([item.id for item in history], [first.id, second.id])
        self.assertEqual(first.decided_by, DecidedBy.ORGANIZER)
        self.assertEqual(second.decided_by, DecidedBy.ADMIN)
        self.assertEqual(self.state.decisions.current(self.event_id).slot_id, self.created.slots[2].id)

    def test_missing_slot_id(self):
        with self.assertRaises(InvalidInput) as ctx:
            self.state.events.decide(self.event_id, "", admin_credential=ADMIN_SECRET)
        self.assertEqual(ctx.exception.message, "slotId required")

    def test_slot_of_another_event(self):
        other = create_sample_event(self.state)
        with self.assertRaises(InvalidInput):
            self.state.events.decide(self.event_id, other.slots[0].id, admin_credential=ADMIN_SECRET)
        self.assertEqual(self.store.rows("decisions"), [])

    def test_requires_credential(self):
        with self.assertRaises(Unauthorized):
            self.state.events.decide(self.event_id, self.created.slots[0].id)


class TestCalendarExporter(unittest.TestCase):
    def setUp(self):
        self.clock = FrozenClock()
        self.state = make_state(clock=self.clock)
        self.created = create_sample_event(
            self.state,
            title="Kickoff, then; retro",
            description="Bring notes\nand coffee",
            location="Room 4; floor 2",
        )
        self.event_id = self.created.event.id

    def _decide(self, position):
        return self.state.events.decide(
            self.event_id,
            self.created.slots[position].id,
            organizer_credential=self.created.organizer_key,
        )

    def test_no_decision_is_not_found(self):
        with self.assertRaises(NotFound):
            self.state.calendar.export_current_decision(self.event_id)

    def test_exports_latest_decision(self):
        self._decide(0)
        self.clock.advance(hours=1)
        latest = self._decide(1)

        document = self.state.calendar.export_current_decision(self.event_id)

        slot = self.created.slots[1]
        self.assertIn(f"DTSTART:{to_ics_datetime(slot.start_at)}", document.content)
        self.assertIn(f"DTEND:{to_ics_datetime(slot.end_at)}", document.content)
        self.assertIn(f"UID:{latest.ics_uid}", document.content)
        self.assertEqual(document.filename, f"event-{self.event_id}.ics")
        self.assertEqual(document.content_type, CALENDAR_CONTENT_TYPE)

    def test_document_layout(self):
        self._decide(0)
        lines = self.state.calendar.export_current_decision(self.event_id).content.split("\r\n")

        self.assertEqual(lines[0], "BEGIN:VCALENDAR")
        self.assertEqual(lines[-1], "END:VCALENDAR")
        self.assertIn("VERSION:2.0", lines)
        self.assertIn("PRODID:-//slotvote//EN", lines)
        self.assertIn("SUMMARY:Kickoff then retro", lines)
        self.assertIn(f"DESCRIPTION:Bring notes\\nand coffee\\n{SITE_URL}/event/{self.event_id}", lines)
        self.assertIn(f"URL:{SITE_URL}/event/{self.event_id}", lines)
        self.assertIn("LOCATION:Room 4 floor 2", lines)
        self.assertIn("DTSTART:20261102T100000Z", lines)

    def test_uid_is_stable_across_exports(self):
        self._decide(0)
        first = self.state.calendar.export_current_decision(self.event_id).content
        self.clock.advance(days=1)
        second = self.state.calendar.export_current_decision(self.event_id).content
        self.assertEqual(first, second)


class TestIcsFormatting(unittest.TestCase):
    def test_escape_text(self):
        self.assertEqual(escape_text("a\\b"), "a\\\\b")
        self.assertEqual(escape_text("one\ntwo"), "one\\ntwo")
        self.assertEqual(escape_text("x, y; z\r"), "x y z")

    def test_to_ics_datetime(self):
        self.assertEqual(to_ics_datetime(utc(2026, 1, 5, 7, 30)), "20260105T073000Z")

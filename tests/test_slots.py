"""
Tests for services/slots.py

Slot indices stay gap-free and unique however appends interleave.
"""

import threading
import unittest
from datetime import datetime, timedelta

from slotvote.domain import InvalidInput, NotFound, SlotRange
from slotvote.services.slots import validate_ranges

from tests.fakes import ADMIN_SECRET, FakeSupabase, create_sample_event, make_state, utc

BASE = utc(2026, 11, 10, 9)


def _range(hours_from_base, length_hours=1):
    start = BASE + timedelta(hours=hours_from_base)
    return SlotRange(start_at=start, end_at=start + timedelta(hours=length_hours))


class TestValidateRanges(unittest.TestCase):
    def test_empty_list_rejected(self):
        with self.assertRaises(InvalidInput):
            validate_ranges([])

    def test_start_must_precede_end(self):
        with self.assertRaises(InvalidInput) as ctx:
            validate_ranges([_range(0), SlotRange(start_at=BASE, end_at=BASE)])
        self.assertIn("slots[1]", ctx.exception.message)

        with self.assertRaises(InvalidInput):
            validate_ranges([SlotRange(start_at=BASE + timedelta(hours=2), end_at=BASE)])

    def test_naive_datetimes_rejected(self):
        naive = datetime(2026, 11, 10, 9)
        with self.assertRaises(InvalidInput):
            validate_ranges([SlotRange(start_at=naive, end_at=naive + timedelta(hours=1))])

    def test_offsets_are_normalized_to_utc(self):
        tokyo = datetime.fromisoformat("2026-11-10T18:00:00+09:00")
        (normalized,) = validate_ranges([SlotRange(start_at=tokyo, end_at=tokyo + timedelta(hours=1))])
        self.assertEqual(normalized.start_at, BASE)
        self.assertEqual(normalized.start_at.utcoffset(), timedelta(0))


class TestSlotAllocator(unittest.TestCase):
    def setUp(self):
        self.store = FakeSupabase()
        self.state = make_state(self.store)
        self.created = create_sample_event(self.state, slot_count=3)
        self.event_id = self.created.event.id

    def _indices(self, event_id=None):
        return [slot.slot_index for slot in self.state.context.slots.list_for_event(event_id or self.event_id)]

    def test_created_event_has_contiguous_indices(self):
        self.assertEqual([slot.slot_index for slot in self.created.slots], [0, 1, 2])
        self.assertEqual(self._indices(), [0, 1, 2])

    def test_append_continues_after_last_index(self):
        added = self.state.slots.add_slots(self.event_id, [_range(0), _range(2)])

        self.assertEqual([slot.slot_index for slot in added], [3, 4])
        self.assertEqual(self._indices(), [0, 1, 2, 3, 4])

    def test_interleaved_appends_never_collide(self):
        other = create_sample_event(self.state, slot_count=1)
        self.state.slots.add_slots(self.event_id, [_range(0)])
        self.state.slots.add_slots(other.event.id, [_range(1), _range(2)])
        self.state.slots.add_slots(self.event_id, [_range(3), _range(4)])
        self.state.slots.add_slots(other.event.id, [_range(5)])

        self.assertEqual(self._indices(), [0, 1, 2, 3, 4, 5])
        self.assertEqual(self._indices(other.event.id), [0, 1, 2, 3])

    def test_concurrent_appends_are_gap_free(self):
        barrier = threading.Barrier(8)
        errors = []

        def worker(offset):
            try:
                barrier.wait()
                self.state.slots.add_slots(self.event_id, [_range(offset * 3), _range(offset * 3 + 1)])
            except Exception as exc:  # collected for the assertion below
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(position,)) for position in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        self.assertEqual(self._indices(), list(range(3 + 16)))

    def test_unknown_event_is_not_found(self):
        with self.assertRaises(NotFound):
            self.state.slots.add_slots("no-such-event", [_range(0)])
        self.assertEqual(self._indices(), [0, 1, 2])

    def test_invalid_range_adds_nothing(self):
        with self.assertRaises(InvalidInput):
            self.state.slots.add_slots(self.event_id, [_range(0), SlotRange(start_at=BASE, end_at=BASE)])
        self.assertEqual(self._indices(), [0, 1, 2])

    def test_event_service_requires_organizer_or_admin(self):
        added = self.state.events.add_slots(
            self.event_id,
            [_range(0)],
            organizer_credential=self.created.organizer_key,
        )
        self.assertEqual(added[0].slot_index, 3)

        added = self.state.events.add_slots(self.event_id, [_range(1)], admin_credential=ADMIN_SECRET)
        self.assertEqual(added[0].slot_index, 4)

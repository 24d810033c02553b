"""Contract tests for RegistrationStore implementations.

Every test runs against the in-memory store and the Django ORM store.
Run with: pytest tests/test_stores.py -v
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from conftest import assert_invariant, make_contact
from registrations.domain import EventId, EventStatus, Registration, RegistrationId
from registrations.domain.errors import ErrorCode, EventNotFoundError
from registrations.domain.results import Reject
from registrations.stores.memory_store import InMemoryRegistrationStore


class TestApplyCreate:
    def test_admit_inserts_row_and_raises_count(self, harness):
        event_id = harness.make_event(capacity=10)

        registration = harness.store.apply_create(event_id, 3, make_contact())

        assert isinstance(registration, Registration)
        assert registration.party_size == 3
        assert harness.store.get_event(event_id).current_attendees == 3
        assert harness.store.list_by_event(event_id) == [registration]

    def test_capacity_example(self, harness):
        event_id = harness.make_event(capacity=10)
        harness.store.apply_create(event_id, 5, make_contact())
        harness.store.apply_create(event_id, 3, make_contact())

        rejected = harness.store.apply_create(event_id, 3, make_contact())
        assert rejected == Reject(reason=ErrorCode.CAPACITY_EXCEEDED, remaining=2)
        assert harness.store.get_event(event_id).current_attendees == 8

        admitted = harness.store.apply_create(event_id, 2, make_contact())
        assert isinstance(admitted, Registration)
        assert harness.store.get_event(event_id).current_attendees == 10

        full = harness.store.apply_create(event_id, 1, make_contact())
        assert full == Reject(reason=ErrorCode.CAPACITY_EXCEEDED, remaining=0)
        assert_invariant(harness.store, event_id)

    def test_rejection_writes_nothing(self, harness):
        event_id = harness.make_event(capacity=2)

        outcome = harness.store.apply_create(event_id, 0, make_contact())

        assert outcome == Reject(reason=ErrorCode.INVALID_PARTY_SIZE)
        assert harness.store.list_by_event(event_id) == []
        assert harness.store.get_event(event_id).current_attendees == 0

    def test_unknown_event_raises(self, harness):
        with pytest.raises(EventNotFoundError):
            harness.store.apply_create(EventId(uuid.uuid4()), 1, make_contact())

    def test_cancelled_event_rejects(self, harness):
        event_id = harness.make_event(status=EventStatus.CANCELLED)

        outcome = harness.store.apply_create(event_id, 1, make_contact())

        assert outcome == Reject(reason=ErrorCode.EVENT_CANCELLED)
        assert harness.store.get_event(event_id).current_attendees == 0

    def test_duplicate_email_rejects_case_insensitively(self, harness):
        event_id = harness.make_event()
        harness.store.apply_create(event_id, 2, make_contact(email="kari@example.com"))

        outcome = harness.store.apply_create(
            event_id, 1, make_contact(email="KARI@example.com")
        )

        assert outcome == Reject(reason=ErrorCode.DUPLICATE_REGISTRATION)
        assert harness.store.get_event(event_id).current_attendees == 2

    def test_duplicate_email_ignores_surrounding_whitespace(self, harness):
        event_id = harness.make_event()
        harness.store.apply_create(event_id, 1, make_contact(email=" Kari@example.com"))

        outcome = harness.store.apply_create(event_id, 1, make_contact(email="kari@example.com"))

        assert outcome == Reject(reason=ErrorCode.DUPLICATE_REGISTRATION)
        assert harness.store.get_event(event_id).current_attendees == 1

    def test_same_email_may_register_for_other_events(self, harness):
        first = harness.make_event()
        second = harness.make_event()
        harness.store.apply_create(first, 1, make_contact(email="kari@example.com"))

        outcome = harness.store.apply_create(second, 1, make_contact(email="kari@example.com"))

        assert isinstance(outcome, Registration)


class TestApplyCancel:
    def test_cancel_example(self, harness):
        event_id = harness.make_event(capacity=10)
        harness.store.apply_create(event_id, 7, make_contact())
        registration = harness.store.apply_create(event_id, 3, make_contact())
        assert harness.store.get_event(event_id).current_attendees == 10

        cancellation = harness.store.apply_cancel(registration.id)

        assert cancellation.removed_party_size == 3
        assert cancellation.event_id == event_id
        assert harness.store.get_event(event_id).current_attendees == 7

        assert harness.store.apply_cancel(registration.id) is None
        assert harness.store.get_event(event_id).current_attendees == 7
        assert_invariant(harness.store, event_id)

    def test_unknown_registration_is_a_no_op(self, harness):
        event_id = harness.make_event()
        harness.store.apply_create(event_id, 2, make_contact())

        assert harness.store.apply_cancel(RegistrationId(uuid.uuid4())) is None
        assert harness.store.get_event(event_id).current_attendees == 2

    def test_count_is_floored_at_zero_after_drift(self, harness):
        event_id = harness.make_event()
        registration = harness.store.apply_create(event_id, 3, make_contact())
        harness.force_count(event_id, 1)

        harness.store.apply_cancel(registration.id)

        assert harness.store.get_event(event_id).current_attendees == 0

    def test_cancelled_registration_is_gone(self, harness):
        event_id = harness.make_event()
        registration = harness.store.apply_create(event_id, 1, make_contact())

        harness.store.apply_cancel(registration.id)

        assert harness.store.get_registration(registration.id) is None
        assert harness.store.list_by_event(event_id) == []

    def test_freed_room_can_be_taken(self, harness):
        event_id = harness.make_event(capacity=4)
        registration = harness.store.apply_create(event_id, 4, make_contact())
        harness.store.apply_cancel(registration.id)

        outcome = harness.store.apply_create(event_id, 4, make_contact())

        assert isinstance(outcome, Registration)
        assert_invariant(harness.store, event_id)


class TestReads:
    def test_get_registration_round_trips_contact(self, harness):
        event_id = harness.make_event()
        contact = make_contact(name="Kari Nordmann", phone="+4791234567", comments="Vegetar")
        created = harness.store.apply_create(event_id, 2, contact)

        fetched = harness.store.get_registration(created.id)

        assert fetched.contact == contact
        assert fetched.event_id == event_id

    def test_list_is_in_sign_up_order(self, harness):
        event_id = harness.make_event()
        names = ["Emma", "Lars", "Sofie"]
        for name in names:
            harness.store.apply_create(event_id, 1, make_contact(name=name))

        listed = [r.contact.name for r in harness.store.list_by_event(event_id)]

        assert listed == names

    def test_list_only_returns_own_event(self, harness):
        first = harness.make_event()
        second = harness.make_event()
        harness.store.apply_create(first, 1, make_contact())

        assert harness.store.list_by_event(second) == []

    def test_roster_pairs_event_with_its_registrations(self, harness):
        event_id = harness.make_event()
        first = harness.store.apply_create(event_id, 2, make_contact(name="Emma"))
        second = harness.store.apply_create(event_id, 1, make_contact(name="Lars"))

        event, registrations = harness.store.get_roster(event_id)

        assert event.id == event_id
        assert registrations == [first, second]
        assert event.current_attendees == sum(r.party_size for r in registrations)

    def test_roster_of_unknown_event_is_none(self, harness):
        assert harness.store.get_roster(EventId(uuid.uuid4())) is None


class TestReconcile:
    def test_corrects_drift(self, harness):
        event_id = harness.make_event()
        harness.store.apply_create(event_id, 2, make_contact())
        harness.store.apply_create(event_id, 3, make_contact())
        harness.force_count(event_id, 9)

        report = harness.store.reconcile(event_id)

        assert (report.recorded, report.actual, report.applied) == (9, 5, True)
        assert report.drift == 4
        assert_invariant(harness.store, event_id)

    def test_dry_run_reports_without_writing(self, harness):
        event_id = harness.make_event()
        harness.store.apply_create(event_id, 2, make_contact())
        harness.force_count(event_id, 0)

        report = harness.store.reconcile(event_id, dry_run=True)

        assert report.applied is False
        assert report.drift == -2
        assert harness.store.get_event(event_id).current_attendees == 0

    def test_consistent_event_is_left_alone(self, harness):
        event_id = harness.make_event()
        harness.store.apply_create(event_id, 2, make_contact())

        report = harness.store.reconcile(event_id)

        assert report.applied is False
        assert report.drift == 0

    def test_unknown_event_raises(self, harness):
        with pytest.raises(EventNotFoundError):
            harness.store.reconcile(EventId(uuid.uuid4()))


def test_memory_store_breaks_created_at_ties_by_id(memory_harness):
    instant = datetime(2026, 5, 17, 12, 0, tzinfo=timezone.utc)
    store = InMemoryRegistrationStore(clock=lambda: instant)
    memory_harness.store = store
    event_id = memory_harness.make_event()

    created = [store.apply_create(event_id, 1, make_contact()) for _ in range(5)]

    expected = sorted(created, key=lambda r: str(r.id.value))
    assert store.list_by_event(event_id) == expected


def test_memory_store_orders_by_created_at_first(memory_harness):
    ticks = iter(
        datetime(2026, 5, 17, 12, 0, tzinfo=timezone.utc) - timedelta(minutes=m)
        for m in range(3)
    )
    store = InMemoryRegistrationStore(clock=lambda: next(ticks))
    memory_harness.store = store
    event_id = memory_harness.make_event()

    created = [store.apply_create(event_id, 1, make_contact()) for _ in range(3)]

    assert store.list_by_event(event_id) == list(reversed(created))


def test_memory_store_keeps_no_locks_for_unknown_events(memory_harness):
    store = memory_harness.store
    memory_harness.make_event()

    for _ in range(50):
        unknown = EventId(uuid.uuid4())
        with pytest.raises(EventNotFoundError):
            store.apply_create(unknown, 1, make_contact())
        with pytest.raises(EventNotFoundError):
            store.reconcile(unknown)
        assert store.get_roster(unknown) is None

    assert len(store._event_locks) == 1

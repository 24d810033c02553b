"""Tests for the attendee summary projection.

Run with: pytest tests/test_attendee_view.py -v
"""

import uuid
from unittest import mock

import pytest

from conftest import make_contact
from registrations.domain.errors import EventNotFoundError, InvalidEventIdError
from registrations.services.attendee_view import (
    AttendeeSummary,
    AttendeeViewBuilder,
    SummaryKind,
    format_attendee_line,
)


@pytest.fixture
def builder(memory_harness) -> AttendeeViewBuilder:
    return AttendeeViewBuilder(memory_harness.store)


class TestFormatAttendeeLine:
    def test_single_attendee_has_no_suffix(self):
        assert format_attendee_line("Emma Hansen", 1) == "Emma Hansen"

    def test_guests_are_appended(self):
        assert format_attendee_line("Lars Andersen", 3) == "Lars Andersen (+2)"


class TestSummarize:
    def test_empty_event(self, builder, memory_harness):
        event_id = memory_harness.make_event()

        assert builder.summarize(str(event_id)) == AttendeeSummary(
            kind=SummaryKind.EMPTY, total=0
        )

    def test_lists_names_in_sign_up_order(self, builder, memory_harness):
        event_id = memory_harness.make_event()
        store = memory_harness.store
        store.apply_create(event_id, 3, make_contact(name="Emma Hansen"))
        store.apply_create(event_id, 1, make_contact(name="Lars Andersen"))
        store.apply_create(event_id, 2, make_contact(name="Sofie Johansen"))

        summary = builder.summarize(str(event_id))

        assert summary.kind is SummaryKind.NAMED
        assert summary.total == 6
        assert summary.lines == ("Emma Hansen (+2)", "Lars Andersen", "Sofie Johansen (+1)")

    def test_cutoff_uses_attendee_count_not_registration_count(self, builder, memory_harness):
        event_id = memory_harness.make_event()
        memory_harness.store.apply_create(event_id, 4, make_contact())
        memory_harness.store.apply_create(event_id, 4, make_contact())

        summary = builder.summarize(str(event_id), max_named_entries=7)

        assert summary == AttendeeSummary(kind=SummaryKind.TOO_MANY, total=8)

    def test_count_equal_to_cutoff_is_still_listed(self, builder, memory_harness):
        event_id = memory_harness.make_event()
        memory_harness.store.apply_create(event_id, 10, make_contact(name="Thomas Berg"))

        summary = builder.summarize(str(event_id), max_named_entries=10)

        assert summary.kind is SummaryKind.NAMED
        assert summary.lines == ("Thomas Berg (+9)",)

    def test_default_cutoff_comes_from_settings(self, builder, memory_harness, settings):
        settings.REGISTRATIONS = {**settings.REGISTRATIONS, "MAX_NAMED_ATTENDEES": 2}
        event_id = memory_harness.make_event()
        memory_harness.store.apply_create(event_id, 3, make_contact())

        assert builder.summarize(str(event_id)).kind is SummaryKind.TOO_MANY

    def test_summary_never_mutates(self, builder, memory_harness):
        event_id = memory_harness.make_event()
        memory_harness.store.apply_create(event_id, 2, make_contact())
        before = memory_harness.store.get_event(event_id)

        builder.summarize(str(event_id))

        assert memory_harness.store.get_event(event_id) == before

    def test_unknown_event_raises(self, builder):
        with pytest.raises(EventNotFoundError):
            builder.summarize(str(uuid.uuid4()))

    def test_invalid_event_id_raises(self, builder):
        with pytest.raises(InvalidEventIdError):
            builder.summarize("nope")

    def test_total_and_lines_come_from_one_snapshot(self, builder, memory_harness):
        event_id = memory_harness.make_event()
        memory_harness.store.apply_create(event_id, 2, make_contact(name="Emma Hansen"))
        store = memory_harness.store
        split_read = AssertionError("summary must not read count and names separately")

        with mock.patch.object(store, "get_event", side_effect=split_read), mock.patch.object(
            store, "list_by_event", side_effect=split_read
        ):
            summary = builder.summarize(str(event_id))

        assert summary == AttendeeSummary(
            kind=SummaryKind.NAMED, total=2, lines=("Emma Hansen (+1)",)
        )

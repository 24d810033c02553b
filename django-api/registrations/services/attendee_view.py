"""Read-only attendee summaries for display.

Display policy (the named-entry cutoff and the "(+N)" guest notation) lives
here and nowhere near the capacity rules.
"""

from dataclasses import dataclass
from enum import Enum

from django.conf import settings

from registrations.domain.errors import EventNotFoundError
from registrations.services.registration_service import parse_event_id
from registrations.stores.interfaces import RegistrationStore


class SummaryKind(Enum):
    EMPTY = "empty"
    TOO_MANY = "too_many"
    NAMED = "named"


@dataclass(frozen=True)
class AttendeeSummary:
    kind: SummaryKind
    total: int
    lines: tuple[str, ...] = ()


def format_attendee_line(name: str, party_size: int) -> str:
    if party_size > 1:
        return f"{name} (+{party_size - 1})"
    return name


class AttendeeViewBuilder:
    """Builds attendee summaries from store reads."""

    def __init__(self, store: RegistrationStore) -> None:
        self._store = store

    def summarize(self, event_id: str, max_named_entries: int | None = None) -> AttendeeSummary:
        """Summarize who is coming to an event.

        Rosters larger than the cutoff are not enumerated; callers should
        point users at the bulk export instead.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        if max_named_entries is None:
            max_named_entries = settings.REGISTRATIONS["MAX_NAMED_ATTENDEES"]

        parsed_id = parse_event_id(event_id)
        roster = self._store.get_roster(parsed_id)
        if roster is None:
            raise EventNotFoundError(event_id)
        event, registrations = roster

        total = event.current_attendees
        if total == 0:
            return AttendeeSummary(kind=SummaryKind.EMPTY, total=0)
        if total > max_named_entries:
            return AttendeeSummary(kind=SummaryKind.TOO_MANY, total=total)

        lines = tuple(format_attendee_line(r.contact.name, r.party_size) for r in registrations)
        return AttendeeSummary(kind=SummaryKind.NAMED, total=total, lines=lines)

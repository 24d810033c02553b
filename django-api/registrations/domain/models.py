"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in registrations/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime

from registrations.domain.value_objects import (
    Capacity,
    Contact,
    EventId,
    EventStatus,
    RegistrationId,
)


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    title: str
    capacity: Capacity | None
    current_attendees: int
    created_at: datetime
    status: EventStatus = EventStatus.ACTIVE
    description: str = ""
    location: str = ""
    starts_at: datetime | None = None

    @property
    def is_cancelled(self) -> bool:
        return self.status is EventStatus.CANCELLED


@dataclass(frozen=True)
class Registration:
    """Domain representation of a Registration.

    Party size is immutable; changing it is a cancel followed by a new
    registration.
    """

    id: RegistrationId
    event_id: EventId
    party_size: int
    contact: Contact
    created_at: datetime

    @property
    def sort_key(self) -> tuple[datetime, str]:
        return (self.created_at, str(self.id.value))


@dataclass(frozen=True)
class Cancellation:
    """What an applied cancellation removed."""

    registration_id: RegistrationId
    event_id: EventId
    removed_party_size: int


@dataclass(frozen=True)
class ReconcileReport:
    """Recorded count versus the sum of registration party sizes."""

    event_id: EventId
    recorded: int
    actual: int
    applied: bool

    @property
    def drift(self) -> int:
        return self.recorded - self.actual

"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. A store is the only
component allowed to change an event's attendee count.
"""

from abc import ABC, abstractmethod

from registrations.domain import (
    Cancellation,
    Contact,
    Event,
    EventId,
    ReconcileReport,
    Registration,
    RegistrationId,
)
from registrations.domain.results import Reject


class RegistrationStore(ABC):
    """Interface for registration persistence and attendee accounting."""

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        """Return a registration by ID, or None if not found."""
        ...

    @abstractmethod
    def apply_create(
        self, event_id: EventId, party_size: int, contact: Contact
    ) -> Registration | Reject:
        """Admit a registration and raise the event count, as one atomic unit.

        Concurrent calls for the same event serialize around the capacity
        check. On Reject nothing is written.

        Raises:
            EventNotFoundError: If the event does not exist.
            StorageUnavailableError: If the datastore fails; nothing was written.
        """
        ...

    @abstractmethod
    def apply_cancel(self, registration_id: RegistrationId) -> Cancellation | None:
        """Delete a registration and lower the event count, as one atomic unit.

        Returns None, without writing anything, if the registration does not
        exist.

        Raises:
            StorageUnavailableError: If the datastore fails; nothing was written.
        """
        ...

    @abstractmethod
    def list_by_event(self, event_id: EventId) -> list[Registration]:
        """Return an event's registrations ordered by created_at, then id."""
        ...

    @abstractmethod
    def get_roster(self, event_id: EventId) -> tuple[Event, list[Registration]] | None:
        """Return an event with its ordered registrations, read as one snapshot.

        The event's count always matches the returned registrations; no
        create or cancel lands between the two reads. None if the event
        does not exist.
        """
        ...

    @abstractmethod
    def reconcile(self, event_id: EventId, dry_run: bool = False) -> ReconcileReport:
        """Recompute the cached count from the event's registrations.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        ...

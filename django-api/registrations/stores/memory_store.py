"""In-process implementation of the RegistrationStore.

Used when storage is embedded in the process (tests, single-worker
deployments). One lock per event id guards that event's count together with
its registration set; a separate registry lock only protects creation of the
per-event locks and the id index.
"""

import dataclasses
import logging
import threading
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from registrations.domain import (
    Cancellation,
    Contact,
    Event,
    EventId,
    ReconcileReport,
    Registration,
    RegistrationId,
)
from registrations.domain import accountant
from registrations.domain.errors import ErrorCode, EventNotFoundError
from registrations.domain.results import Reject
from registrations.stores.interfaces import RegistrationStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryRegistrationStore(RegistrationStore):
    """Thread-safe store keeping events and registrations in dictionaries."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._registry_lock = threading.Lock()
        self._event_locks: dict[EventId, threading.Lock] = {}
        self._events: dict[EventId, Event] = {}
        self._registrations: dict[EventId, dict[RegistrationId, Registration]] = {}
        self._owner: dict[RegistrationId, EventId] = {}

    def add_event(self, event: Event) -> None:
        """Store an event created elsewhere, replacing any previous version.

        The count is taken as given; registrations already held for the
        event are kept.
        """
        with self._registry_lock:
            self._events[event.id] = event
            self._registrations.setdefault(event.id, {})
            self._event_locks.setdefault(event.id, threading.Lock())

    def get_event(self, event_id: EventId) -> Event | None:
        return self._events.get(event_id)

    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        with self._registry_lock:
            event_id = self._owner.get(registration_id)
        if event_id is None:
            return None
        with self._lock_for(event_id):
            return self._registrations[event_id].get(registration_id)

    def apply_create(
        self, event_id: EventId, party_size: int, contact: Contact
    ) -> Registration | Reject:
        if event_id not in self._events:
            raise EventNotFoundError(str(event_id))
        with self._lock_for(event_id):
            event = self._events[event_id]
            if event.is_cancelled:
                return Reject(reason=ErrorCode.EVENT_CANCELLED)

            existing = self._registrations[event_id]
            if any(
                r.contact.normalized_email == contact.normalized_email
                for r in existing.values()
            ):
                return Reject(reason=ErrorCode.DUPLICATE_REGISTRATION)

            decision = accountant.evaluate(event.current_attendees, event.capacity, party_size)
            if isinstance(decision, Reject):
                return decision

            registration = Registration(
                id=RegistrationId(uuid.uuid4()),
                event_id=event_id,
                party_size=party_size,
                contact=contact,
                created_at=self._clock(),
            )
            existing[registration.id] = registration
            self._events[event_id] = dataclasses.replace(
                event, current_attendees=decision.new_count
            )
            with self._registry_lock:
                self._owner[registration.id] = event_id

        return registration

    def apply_cancel(self, registration_id: RegistrationId) -> Cancellation | None:
        with self._registry_lock:
            event_id = self._owner.get(registration_id)
        if event_id is None:
            return None

        with self._lock_for(event_id):
            registration = self._registrations[event_id].pop(registration_id, None)
            if registration is None:
                # Lost a race with another cancel of the same id.
                return None
            event = self._events[event_id]
            new_count = accountant.apply_floor(
                event.current_attendees,
                accountant.compute_cancellation_delta(registration.party_size),
            )
            self._events[event_id] = dataclasses.replace(event, current_attendees=new_count)
            with self._registry_lock:
                self._owner.pop(registration_id, None)

        return Cancellation(
            registration_id=registration_id,
            event_id=event_id,
            removed_party_size=registration.party_size,
        )

    def list_by_event(self, event_id: EventId) -> list[Registration]:
        if event_id not in self._events:
            return []
        with self._lock_for(event_id):
            snapshot = list(self._registrations[event_id].values())
        return sorted(snapshot, key=lambda r: r.sort_key)

    def get_roster(self, event_id: EventId) -> tuple[Event, list[Registration]] | None:
        if event_id not in self._events:
            return None
        with self._lock_for(event_id):
            event = self._events[event_id]
            snapshot = list(self._registrations[event_id].values())
        return event, sorted(snapshot, key=lambda r: r.sort_key)

    def reconcile(self, event_id: EventId, dry_run: bool = False) -> ReconcileReport:
        if event_id not in self._events:
            raise EventNotFoundError(str(event_id))
        with self._lock_for(event_id):
            event = self._events[event_id]
            actual = sum(r.party_size for r in self._registrations[event_id].values())
            applied = False
            if actual != event.current_attendees and not dry_run:
                self._events[event_id] = dataclasses.replace(event, current_attendees=actual)
                applied = True
                logger.warning(
                    "Corrected attendee count drift",
                    extra={
                        "event_id": str(event_id),
                        "recorded": event.current_attendees,
                        "actual": actual,
                    },
                )

        return ReconcileReport(
            event_id=event_id,
            recorded=event.current_attendees,
            actual=actual,
            applied=applied,
        )

    def _lock_for(self, event_id: EventId) -> threading.Lock:
        with self._registry_lock:
            lock = self._event_locks.get(event_id)
            if lock is None:
                lock = threading.Lock()
                self._event_locks[event_id] = lock
            return lock

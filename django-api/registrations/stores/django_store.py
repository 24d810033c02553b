"""Django ORM implementation of the RegistrationStore.

Each mutation runs in ``transaction.atomic()`` and takes a row lock on the
event with ``select_for_update()``. The event row is the serialization point
for everything that touches its count, so registrations for different events
never wait on each other.
"""

import logging
from functools import partial, wraps

from django.db import DatabaseError, transaction
from django.db.models import Sum

from registrations import models as orm
from registrations.cache_keys import invalidate_event
from registrations.domain import (
    Cancellation,
    Capacity,
    Contact,
    Event,
    EventId,
    EventStatus,
    Language,
    ReconcileReport,
    Registration,
    RegistrationId,
)
from registrations.domain import accountant
from registrations.domain.errors import ErrorCode, EventNotFoundError, StorageUnavailableError
from registrations.domain.results import Reject
from registrations.stores.interfaces import RegistrationStore

logger = logging.getLogger(__name__)


def _storage_guard(operation: str):
    """Re-raise database failures as StorageUnavailableError."""

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DatabaseError as exc:
                logger.exception("Storage failure during %s", operation)
                raise StorageUnavailableError(operation) from exc

        return wrapper

    return decorator


def _to_event(record: orm.Event) -> Event:
    capacity = None
    if record.max_attendees is not None:
        capacity = Capacity(record.max_attendees)
    return Event(
        id=EventId(record.id),
        title=record.title,
        capacity=capacity,
        current_attendees=record.current_attendees,
        created_at=record.created_at,
        status=EventStatus(record.status),
        description=record.description,
        location=record.location,
        starts_at=record.starts_at,
    )


def _to_registration(record: orm.Registration) -> Registration:
    return Registration(
        id=RegistrationId(record.id),
        event_id=EventId(record.event_id),
        party_size=record.party_size,
        contact=Contact(
            name=record.name,
            email=record.email,
            phone=record.phone,
            language=Language(record.language),
            comments=record.comments,
        ),
        created_at=record.created_at,
    )


class DjangoRegistrationStore(RegistrationStore):
    """PostgreSQL-backed registration store using Django ORM."""

    @_storage_guard("get_event")
    def get_event(self, event_id: EventId) -> Event | None:
        record = orm.Event.objects.filter(pk=event_id.value).first()
        if record is None:
            return None
        return _to_event(record)

    @_storage_guard("get_registration")
    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        record = orm.Registration.objects.filter(pk=registration_id.value).first()
        if record is None:
            return None
        return _to_registration(record)

    @_storage_guard("apply_create")
    def apply_create(
        self, event_id: EventId, party_size: int, contact: Contact
    ) -> Registration | Reject:
        with transaction.atomic():
            try:
                event = orm.Event.objects.select_for_update().get(pk=event_id.value)
            except orm.Event.DoesNotExist:
                raise EventNotFoundError(str(event_id)) from None

            if event.status == EventStatus.CANCELLED.value:
                return Reject(reason=ErrorCode.EVENT_CANCELLED)

            duplicate = event.registrations.filter(
                email__iexact=contact.normalized_email
            ).exists()
            if duplicate:
                return Reject(reason=ErrorCode.DUPLICATE_REGISTRATION)

            capacity = None
            if event.max_attendees is not None:
                capacity = Capacity(event.max_attendees)
            decision = accountant.evaluate(event.current_attendees, capacity, party_size)
            if isinstance(decision, Reject):
                return decision

            record = orm.Registration.objects.create(
                event=event,
                name=contact.name,
                email=contact.email.strip(),
                phone=contact.phone,
                party_size=party_size,
                comments=contact.comments,
                language=contact.language.value,
            )
            orm.Event.objects.filter(pk=event.pk).update(
                current_attendees=decision.new_count
            )

        return _to_registration(record)

    @_storage_guard("apply_cancel")
    def apply_cancel(self, registration_id: RegistrationId) -> Cancellation | None:
        with transaction.atomic():
            event_pk = (
                orm.Registration.objects.filter(pk=registration_id.value)
                .values_list("event_id", flat=True)
                .first()
            )
            if event_pk is None:
                return None

            # Lock the event first, then re-read the row: a concurrent cancel
            # may have removed it while we waited.
            event = orm.Event.objects.select_for_update().get(pk=event_pk)
            record = orm.Registration.objects.filter(pk=registration_id.value).first()
            if record is None:
                return None

            removed = record.party_size
            record.delete()
            new_count = accountant.apply_floor(
                event.current_attendees,
                accountant.compute_cancellation_delta(removed),
            )
            orm.Event.objects.filter(pk=event.pk).update(current_attendees=new_count)

        return Cancellation(
            registration_id=registration_id,
            event_id=EventId(event_pk),
            removed_party_size=removed,
        )

    @_storage_guard("list_by_event")
    def list_by_event(self, event_id: EventId) -> list[Registration]:
        records = orm.Registration.objects.filter(event_id=event_id.value).order_by(
            "created_at", "id"
        )
        return [_to_registration(record) for record in records]

    @_storage_guard("get_roster")
    def get_roster(self, event_id: EventId) -> tuple[Event, list[Registration]] | None:
        # Holding the event lock keeps writers out until both reads are done.
        with transaction.atomic():
            record = orm.Event.objects.select_for_update().filter(pk=event_id.value).first()
            if record is None:
                return None
            registrations = [
                _to_registration(row)
                for row in record.registrations.order_by("created_at", "id")
            ]
        return _to_event(record), registrations

    @_storage_guard("reconcile")
    def reconcile(self, event_id: EventId, dry_run: bool = False) -> ReconcileReport:
        with transaction.atomic():
            try:
                event = orm.Event.objects.select_for_update().get(pk=event_id.value)
            except orm.Event.DoesNotExist:
                raise EventNotFoundError(str(event_id)) from None

            actual = event.registrations.aggregate(total=Sum("party_size"))["total"] or 0
            applied = False
            if actual != event.current_attendees and not dry_run:
                orm.Event.objects.filter(pk=event.pk).update(current_attendees=actual)
                applied = True
                transaction.on_commit(partial(invalidate_event, event.pk))
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

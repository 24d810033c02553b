"""Registration service - all business logic lives here.

Services:
- Depend only on interfaces (stores, dispatchers)
- Validate identifiers and defaults
- Perform orchestration and error mapping
- Return tagged results for expected outcomes, raise domain errors otherwise

The confirmation is sent after the store has committed and outside any event
lock. Its failure is reported as a warning and never undoes the registration.
"""

import logging

from registrations.domain import Contact, Event, EventId, Registration, RegistrationId
from registrations.domain.errors import (
    ErrorCode,
    EventNotFoundError,
    InvalidEventIdError,
    InvalidRegistrationIdError,
    RegistrationNotFoundError,
)
from registrations.domain.results import (
    CancelOutcome,
    Cancelled,
    Created,
    CreateOutcome,
    NotFound,
    Reject,
    Rejected,
)
from registrations.services.notifications import NotificationDispatcher
from registrations.stores.interfaces import RegistrationStore

logger = logging.getLogger(__name__)

DEFAULT_PARTY_SIZE = 1


def parse_event_id(event_id: str) -> EventId:
    try:
        return EventId.from_string(event_id)
    except (TypeError, ValueError, AttributeError):
        raise InvalidEventIdError() from None


def parse_registration_id(registration_id: str) -> RegistrationId:
    try:
        return RegistrationId.from_string(registration_id)
    except (TypeError, ValueError, AttributeError):
        raise InvalidRegistrationIdError() from None


class RegistrationService:
    """Service for creating, cancelling and listing registrations."""

    def __init__(self, store: RegistrationStore, notifier: NotificationDispatcher) -> None:
        self._store = store
        self._notifier = notifier

    def create(
        self, event_id: str, contact: Contact, party_size: int | None = None
    ) -> CreateOutcome:
        """Register a party for an event.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            StorageUnavailableError: If the store failed; nothing was written.
        """
        parsed_id = parse_event_id(event_id)
        if party_size is None:
            party_size = DEFAULT_PARTY_SIZE

        outcome = self._store.apply_create(parsed_id, party_size, contact)
        if isinstance(outcome, Reject):
            logger.info(
                "Registration rejected",
                extra={
                    "event_id": event_id,
                    "reason": outcome.reason.value,
                    "party_size": party_size,
                },
            )
            return Rejected(reason=outcome.reason, remaining=outcome.remaining)

        logger.info(
            "Registration created",
            extra={
                "event_id": event_id,
                "registration_id": str(outcome.id),
                "party_size": outcome.party_size,
            },
        )
        warnings = () if self._notify(outcome) else (ErrorCode.NOTIFICATION_FAILED,)
        return Created(registration=outcome, warnings=warnings)

    def cancel(self, registration_id: str) -> CancelOutcome:
        """Cancel a registration, returning its party size to the event.

        Cancelling an unknown or already cancelled registration is a no-op
        that returns NotFound.

        Raises:
            InvalidRegistrationIdError: If the id is not a valid UUID.
            StorageUnavailableError: If the store failed; nothing was written.
        """
        parsed_id = parse_registration_id(registration_id)
        cancellation = self._store.apply_cancel(parsed_id)
        if cancellation is None:
            return NotFound(registration_id=parsed_id)

        logger.info(
            "Registration cancelled",
            extra={
                "event_id": str(cancellation.event_id),
                "registration_id": registration_id,
                "party_size": cancellation.removed_party_size,
            },
        )
        return Cancelled(
            registration_id=cancellation.registration_id,
            event_id=cancellation.event_id,
            removed_party_size=cancellation.removed_party_size,
        )

    def list_by_event(self, event_id: str) -> list[Registration]:
        """Return registrations for an event in sign-up order.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        parsed_id = parse_event_id(event_id)
        if self._store.get_event(parsed_id) is None:
            raise EventNotFoundError(event_id)
        return self._store.list_by_event(parsed_id)

    def roster(self, event_id: str) -> tuple[Event, list[Registration]]:
        """Return an event and its registrations read as one snapshot.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        roster = self._store.get_roster(parse_event_id(event_id))
        if roster is None:
            raise EventNotFoundError(event_id)
        return roster

    def get_registration(self, registration_id: str) -> Registration:
        """Return a registration by ID.

        Raises:
            InvalidRegistrationIdError: If the id is not a valid UUID.
            RegistrationNotFoundError: If the registration does not exist.
        """
        registration = self._store.get_registration(parse_registration_id(registration_id))
        if registration is None:
            raise RegistrationNotFoundError(registration_id)
        return registration

    def _notify(self, registration: Registration) -> bool:
        try:
            event = self._store.get_event(registration.event_id)
            if event is None:
                # Event deleted between commit and notification.
                return False
            delivered = self._notifier.send(registration, event, registration.contact.language)
        except Exception:  # noqa: BLE001
            logger.exception(
                "Failed to send confirmation",
                extra={"registration_id": str(registration.id)},
            )
            return False
        if not delivered:
            logger.warning(
                "Confirmation not delivered",
                extra={"registration_id": str(registration.id)},
            )
        return bool(delivered)

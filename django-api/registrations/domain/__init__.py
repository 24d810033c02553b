from registrations.domain.models import Cancellation, Event, ReconcileReport, Registration
from registrations.domain.value_objects import (
    Capacity,
    Contact,
    EventId,
    EventStatus,
    Language,
    RegistrationId,
)

__all__ = [
    "Event",
    "Registration",
    "Cancellation",
    "ReconcileReport",
    "EventId",
    "RegistrationId",
    "Capacity",
    "Contact",
    "EventStatus",
    "Language",
]

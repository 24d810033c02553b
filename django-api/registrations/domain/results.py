"""Tagged results for expected outcomes.

Expected conditions (full event, unknown registration on cancel) come back as
values. Exceptions are reserved for malformed input and infrastructure
failures.
"""

from dataclasses import dataclass

from registrations.domain.errors import ErrorCode
from registrations.domain.models import Registration
from registrations.domain.value_objects import EventId, RegistrationId


@dataclass(frozen=True)
class Admit:
    new_count: int


@dataclass(frozen=True)
class Reject:
    reason: ErrorCode
    remaining: int | None = None


Decision = Admit | Reject


@dataclass(frozen=True)
class Created:
    """A committed registration, with any best-effort warnings."""

    registration: Registration
    warnings: tuple[ErrorCode, ...] = ()


@dataclass(frozen=True)
class Rejected:
    reason: ErrorCode
    remaining: int | None = None


@dataclass(frozen=True)
class Cancelled:
    registration_id: RegistrationId
    event_id: EventId
    removed_party_size: int


@dataclass(frozen=True)
class NotFound:
    registration_id: RegistrationId


CreateOutcome = Created | Rejected
CancelOutcome = Cancelled | NotFound

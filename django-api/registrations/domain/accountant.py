"""Capacity accounting rules.

Pure functions with no I/O. Stores call them inside their atomic section;
nothing here knows about locking or persistence.
"""

from registrations.domain.errors import ErrorCode
from registrations.domain.results import Admit, Decision, Reject
from registrations.domain.value_objects import Capacity


def evaluate(
    existing_count: int,
    capacity: Capacity | None,
    requested_party_size: int,
) -> Decision:
    """Decide whether a party of the requested size fits the event."""
    if (
        not isinstance(requested_party_size, int)
        or isinstance(requested_party_size, bool)
        or requested_party_size <= 0
    ):
        return Reject(reason=ErrorCode.INVALID_PARTY_SIZE)

    new_count = existing_count + requested_party_size
    if capacity is None:
        return Admit(new_count=new_count)

    if new_count <= capacity.value:
        return Admit(new_count=new_count)

    return Reject(
        reason=ErrorCode.CAPACITY_EXCEEDED,
        remaining=max(0, capacity.value - existing_count),
    )


def compute_cancellation_delta(removed_party_size: int | None) -> int:
    """Amount to subtract from the count when a registration is removed.

    Rows without a stored party size count as a single attendee.
    """
    return max(removed_party_size or 1, 0)


def apply_floor(current_count: int, delta: int) -> int:
    # Floor only; a count that needed clamping had already drifted.
    return max(0, current_count - delta)

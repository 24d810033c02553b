"""Cache keys for registration read models.

Summary keys carry a per-event generation token. Invalidation replaces the
token instead of deleting the entry, so a reader that took its key before an
invalidation writes to a key nobody reads any more.
"""

import uuid

from django.core.cache import cache


def _generation_key(event_id) -> str:
    return f"registrations:{event_id}:generation"


def _new_generation() -> str:
    return uuid.uuid4().hex


def summary_key(event_id) -> str:
    """Key for the event's summary in the current generation.

    Take the key before computing the value it will hold.
    """
    generation = cache.get_or_set(_generation_key(event_id), _new_generation, None)
    return f"registrations:{event_id}:summary:{generation}"


def invalidate_event(event_id) -> None:
    cache.set(_generation_key(event_id), _new_generation(), None)

"""Django signals for cache invalidation.

Invalidation is deferred with ``transaction.on_commit``: a rolled-back write
never drops a valid entry. A reader whose summary was computed before the
commit may still store it, but under the previous generation's key (see
``cache_keys``), which is no longer looked up.
"""

from functools import partial

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from registrations.cache_keys import invalidate_event
from registrations.models import Event, Registration


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate caches when an event is saved or deleted."""
    transaction.on_commit(partial(invalidate_event, instance.pk))


@receiver([post_save, post_delete], sender=Registration)
def invalidate_registration_cache(sender, instance, **kwargs):
    """Invalidate the owning event's caches when a registration changes."""
    transaction.on_commit(partial(invalidate_event, instance.event_id))

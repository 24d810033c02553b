"""Pytest configuration and shared fixtures."""

import dataclasses
import itertools
import uuid
from datetime import datetime, timezone

import pytest
from rest_framework.test import APIClient

from registrations import models as orm
from registrations.domain import Capacity, Contact, Event, EventId, EventStatus
from registrations.stores.django_store import DjangoRegistrationStore
from registrations.stores.memory_store import InMemoryRegistrationStore

_contact_ids = itertools.count(1)


def make_contact(name: str | None = None, **overrides) -> Contact:
    n = next(_contact_ids)
    fields = {
        "name": name or f"Guest {n}",
        "email": f"guest{n}@example.com",
    }
    fields.update(overrides)
    return Contact(**fields)


def assert_invariant(store, event_id: EventId) -> None:
    """The cached count equals the sum of the remaining party sizes."""
    event = store.get_event(event_id)
    registrations = store.list_by_event(event_id)
    assert event.current_attendees == sum(r.party_size for r in registrations)


class MemoryHarness:
    kind = "memory"

    def __init__(self) -> None:
        self.store = InMemoryRegistrationStore()

    def make_event(
        self,
        capacity: int | None = None,
        current_attendees: int = 0,
        status: EventStatus = EventStatus.ACTIVE,
        title: str = "Dugnad",
    ) -> EventId:
        event = Event(
            id=EventId(uuid.uuid4()),
            title=title,
            capacity=Capacity(capacity) if capacity is not None else None,
            current_attendees=current_attendees,
            created_at=datetime.now(timezone.utc),
            status=status,
        )
        self.store.add_event(event)
        return event.id

    def force_count(self, event_id: EventId, count: int) -> None:
        event = self.store.get_event(event_id)
        self.store.add_event(dataclasses.replace(event, current_attendees=count))


class DjangoHarness:
    kind = "django"

    def __init__(self) -> None:
        self.store = DjangoRegistrationStore()

    def make_event(
        self,
        capacity: int | None = None,
        current_attendees: int = 0,
        status: EventStatus = EventStatus.ACTIVE,
        title: str = "Dugnad",
    ) -> EventId:
        record = orm.Event.objects.create(
            title=title,
            max_attendees=capacity,
            current_attendees=current_attendees,
            status=status.value,
        )
        return EventId(record.id)

    def force_count(self, event_id: EventId, count: int) -> None:
        orm.Event.objects.filter(pk=event_id.value).update(current_attendees=count)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def memory_harness() -> MemoryHarness:
    return MemoryHarness()


@pytest.fixture(params=["memory", "django"])
def harness(request):
    """A store plus event factory, once per store implementation."""
    if request.param == "django":
        request.getfixturevalue("db")
        return DjangoHarness()
    return MemoryHarness()


@pytest.fixture
def django_harness(db) -> DjangoHarness:
    return DjangoHarness()

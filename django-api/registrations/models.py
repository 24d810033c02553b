"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models


class Event(models.Model):
    """Persistence model for events."""

    STATUS_CHOICES = (
        ("active", "Active"),
        ("cancelled", "Cancelled"),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    location = models.CharField(max_length=255, blank=True, default="")
    starts_at = models.DateTimeField(blank=True, null=True)
    max_attendees = models.PositiveIntegerField(blank=True, null=True)
    current_attendees = models.PositiveIntegerField(default=0, editable=False)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="event_created_at_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class Registration(models.Model):
    """Persistence model for event registrations."""

    LANGUAGE_CHOICES = (
        ("no", "Norsk"),
        ("en", "English"),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(
        Event, on_delete=models.CASCADE, related_name="registrations"
    )
    name = models.CharField(max_length=255)
    email = models.EmailField()
    phone = models.CharField(max_length=50, blank=True, null=True)
    party_size = models.PositiveIntegerField(default=1)
    comments = models.TextField(blank=True, null=True)
    language = models.CharField(max_length=2, choices=LANGUAGE_CHOICES, default="no")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["event", "created_at"], name="registration_event_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(party_size__gte=1),
                name="registration_party_size_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.party_size}) - {self.event_id}"

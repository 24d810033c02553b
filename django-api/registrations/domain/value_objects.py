"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import Enum
from typing import Self
from uuid import UUID


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class RegistrationId:
    """Unique identifier for a Registration."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")


class EventStatus(Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"


class Language(Enum):
    """Language the attendee wants correspondence in."""

    NORWEGIAN = "no"
    ENGLISH = "en"


@dataclass(frozen=True)
class Contact:
    """Attendee-supplied contact details.

    Opaque to the accounting core apart from the email (duplicate detection)
    and the name (attendee summaries).
    """

    name: str
    email: str
    phone: str | None = None
    language: Language = Language.NORWEGIAN
    comments: str | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Contact name cannot be blank")
        if "@" not in self.email:
            raise ValueError("Contact email must be an email address")

    @property
    def normalized_email(self) -> str:
        return self.email.strip().lower()

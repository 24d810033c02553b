"""Confirmation notifications sent after a registration commits."""

import logging
from abc import ABC, abstractmethod

from django.conf import settings
from django.core.mail import EmailMessage
from django.template.loader import render_to_string

from registrations.domain import Event, Language, Registration

logger = logging.getLogger(__name__)

SUBJECTS: dict[Language, str] = {
    Language.NORWEGIAN: "Påmeldingsbekreftelse: {title}",
    Language.ENGLISH: "Registration confirmation: {title}",
}


class NotificationDispatcher(ABC):
    """Interface for best-effort registration notifications."""

    @abstractmethod
    def send(self, registration: Registration, event: Event, locale: Language) -> bool:
        """Send a confirmation. Returns False or raises on failure."""
        ...


class EmailNotificationDispatcher(NotificationDispatcher):
    """Sends the confirmation as a plain-text email to the attendee."""

    def send(
        self, registration: Registration, event: Event, locale: Language | str
    ) -> bool:
        options = settings.REGISTRATIONS
        try:
            locale = Language(locale)
        except ValueError:
            locale = Language(options["DEFAULT_LANGUAGE"])

        body = render_to_string(
            f"registrations/email/confirmation_{locale.value}.txt",
            {
                "name": registration.contact.name,
                "event": event,
                "party_size": registration.party_size,
                "guests": registration.party_size - 1,
                "organization_name": options["ORGANIZATION_NAME"],
            },
        )
        message = EmailMessage(
            subject=SUBJECTS[locale].format(title=event.title),
            body=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[registration.contact.email],
            reply_to=[options["REPLY_TO_EMAIL"]],
        )
        sent = message.send(fail_silently=False)
        logger.info(
            "Confirmation email sent",
            extra={"registration_id": str(registration.id), "event_id": str(event.id)},
        )
        return sent == 1

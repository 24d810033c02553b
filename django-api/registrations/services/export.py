"""Bulk export of an event's registrations as a spreadsheet-friendly CSV."""

import csv
import io
import re

from django.utils import dateformat, timezone

from registrations.domain import Event, Language, Registration

# Excel only detects UTF-8 when the file starts with a byte order mark.
BOM = "\ufeff"

LABELS = {
    Language.NORWEGIAN: {
        "event": "Arrangement:",
        "date": "Dato:",
        "time": "Tid:",
        "location": "Sted:",
        "list": "Påmeldingsliste:",
        "columns": ["Navn", "E-post", "Telefon", "Antall deltakere", "Kommentarer"],
        "total_attendees": "Totalt antall deltakere:",
        "total_registrations": "Antall påmeldinger:",
    },
    Language.ENGLISH: {
        "event": "Event:",
        "date": "Date:",
        "time": "Time:",
        "location": "Location:",
        "list": "Registration List:",
        "columns": ["Name", "Email", "Phone", "Attendee Count", "Comments"],
        "total_attendees": "Total attendees:",
        "total_registrations": "Number of registrations:",
    },
}

DATE_FORMATS = {
    Language.NORWEGIAN: "d.m.Y",
    Language.ENGLISH: "F j, Y",
}


def build_attendee_csv(
    event: Event, registrations: list[Registration], language: Language
) -> str:
    """Render the attendee list with event header rows and totals."""
    labels = LABELS[language]
    date = time = ""
    if event.starts_at is not None:
        starts_at = timezone.localtime(event.starts_at)
        date = dateformat.format(starts_at, DATE_FORMATS[language])
        time = dateformat.format(starts_at, "H:i")

    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL)

    writer.writerow([labels["event"], event.title])
    writer.writerow([labels["date"], date])
    writer.writerow([labels["time"], time])
    writer.writerow([labels["location"], event.location or ""])
    writer.writerow([])
    writer.writerow([labels["list"]])
    writer.writerow(labels["columns"])
    for registration in registrations:
        contact = registration.contact
        writer.writerow(
            [
                contact.name,
                contact.email,
                contact.phone or "",
                registration.party_size,
                contact.comments or "",
            ]
        )
    writer.writerow([])
    writer.writerow(
        [labels["total_attendees"], sum(r.party_size for r in registrations)]
    )
    writer.writerow([labels["total_registrations"], len(registrations)])

    return BOM + output.getvalue()


def export_filename(event: Event) -> str:
    stem = re.sub(r"[^a-zA-Z0-9æøåÆØÅ]", "_", event.title)
    if event.starts_at is not None:
        stem = f"{stem}_{timezone.localtime(event.starts_at).date().isoformat()}"
    return f"{stem}.csv"

from django.core.management.base import BaseCommand, CommandError

from registrations.domain.errors import DomainError
from registrations.models import Event
from registrations.services.registration_service import parse_event_id
from registrations.stores.django_store import DjangoRegistrationStore


class Command(BaseCommand):
    help = "Recompute cached attendee counts from registration rows"

    def add_arguments(self, parser):
        parser.add_argument(
            "--event",
            dest="event_id",
            help="Only reconcile this event (UUID)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report drift without writing corrected counts",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        store = DjangoRegistrationStore()

        try:
            if options["event_id"]:
                event_ids = [parse_event_id(options["event_id"])]
            else:
                event_ids = [
                    parse_event_id(str(pk))
                    for pk in Event.objects.values_list("pk", flat=True)
                ]
            reports = [store.reconcile(event_id, dry_run=dry_run) for event_id in event_ids]
        except DomainError as error:
            raise CommandError(str(error)) from error

        drifted = 0
        for report in reports:
            if report.drift == 0:
                continue
            drifted += 1
            action = "would set" if dry_run else "set"
            self.stdout.write(
                f"Event {report.event_id}: recorded={report.recorded} "
                f"actual={report.actual} ({action} to {report.actual})"
            )

        self.stdout.write(
            self.style.SUCCESS(
                f"Reconciled {len(reports)} events, {drifted} with drift"
                + (" (dry run)" if dry_run else "")
            )
        )

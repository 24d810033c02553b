"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors and rejections to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.conf import settings
from django.core.cache import cache
from django.http import HttpResponse
from django.utils.http import content_disposition_header
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from registrations.cache_keys import summary_key
from registrations.domain import Language
from registrations.domain.errors import USER_MESSAGES, DomainError, ErrorCode
from registrations.domain.results import NotFound, Rejected
from registrations.handlers.serializers import (
    AttendeeSummarySerializer,
    RegistrationCreateSerializer,
    RegistrationSerializer,
)
from registrations.services.attendee_view import AttendeeViewBuilder
from registrations.services.export import build_attendee_csv, export_filename
from registrations.services.notifications import EmailNotificationDispatcher
from registrations.services.registration_service import RegistrationService, parse_event_id
from registrations.stores.django_store import DjangoRegistrationStore

ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_REGISTRATION_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_PARTY_SIZE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.REGISTRATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_CANCELLED: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_REGISTRATION: status.HTTP_409_CONFLICT,
    ErrorCode.STORAGE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def get_registration_service() -> RegistrationService:
    return RegistrationService(DjangoRegistrationStore(), EmailNotificationDispatcher())


def get_attendee_view() -> AttendeeViewBuilder:
    return AttendeeViewBuilder(DjangoRegistrationStore())


def error_response(code: ErrorCode, **extra) -> Response:
    body = {"code": code.value, "message": USER_MESSAGES[code], **extra}
    return Response(body, status=ERROR_STATUS[code])


def domain_error_response(error: DomainError) -> Response:
    return Response(
        {"code": error.code.value, "message": error.message},
        status=ERROR_STATUS[error.code],
    )


class EventRegistrationListView(APIView):
    """Handler for GET/POST /api/events/{event_id}/registrations"""

    def get(self, request: Request, event_id: str) -> Response:
        try:
            registrations = get_registration_service().list_by_event(event_id)
        except DomainError as error:
            return domain_error_response(error)
        return Response(RegistrationSerializer(registrations, many=True).data)

    def post(self, request: Request, event_id: str) -> Response:
        serializer = RegistrationCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(ErrorCode.VALIDATION_FAILED, errors=serializer.errors)

        try:
            outcome = get_registration_service().create(
                event_id,
                serializer.to_contact(),
                party_size=serializer.validated_data.get("party_size"),
            )
        except DomainError as error:
            return domain_error_response(error)

        if isinstance(outcome, Rejected):
            if outcome.remaining is not None:
                return error_response(outcome.reason, remaining=outcome.remaining)
            return error_response(outcome.reason)

        body = RegistrationSerializer(outcome.registration).data
        body["warnings"] = [warning.value for warning in outcome.warnings]
        return Response(body, status=status.HTTP_201_CREATED)


class RegistrationDetailView(APIView):
    """Handler for GET/DELETE /api/registrations/{registration_id}"""

    def get(self, request: Request, registration_id: str) -> Response:
        try:
            registration = get_registration_service().get_registration(registration_id)
        except DomainError as error:
            return domain_error_response(error)
        return Response(RegistrationSerializer(registration).data)

    def delete(self, request: Request, registration_id: str) -> Response:
        try:
            outcome = get_registration_service().cancel(registration_id)
        except DomainError as error:
            return domain_error_response(error)

        if isinstance(outcome, NotFound):
            return error_response(ErrorCode.REGISTRATION_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AttendeeSummaryView(APIView):
    """Handler for GET /api/events/{event_id}/attendees/summary"""

    def get(self, request: Request, event_id: str) -> Response:
        try:
            # Taken before summarizing so a concurrent invalidation wins.
            key = summary_key(parse_event_id(event_id))
        except DomainError as error:
            return domain_error_response(error)

        cached = cache.get(key)
        if cached is not None:
            return Response(cached)

        try:
            summary = get_attendee_view().summarize(event_id)
        except DomainError as error:
            return domain_error_response(error)

        data = dict(AttendeeSummarySerializer(summary).data)
        cache.set(key, data, settings.REGISTRATIONS["SUMMARY_CACHE_TIMEOUT"])
        return Response(data)


class RegistrationExportView(APIView):
    """Handler for GET /api/events/{event_id}/registrations/export

    Returns the full roster as CSV; the summary endpoint stops naming
    attendees above the cutoff. ``?lang=no|en`` picks the labels.
    """

    def get(self, request: Request, event_id: str) -> HttpResponse | Response:
        lang = request.query_params.get("lang", settings.REGISTRATIONS["DEFAULT_LANGUAGE"])
        try:
            language = Language(lang)
        except ValueError:
            return error_response(
                ErrorCode.VALIDATION_FAILED, errors={"lang": ["Unsupported language."]}
            )

        try:
            event, registrations = get_registration_service().roster(event_id)
        except DomainError as error:
            return domain_error_response(error)

        response = HttpResponse(
            build_attendee_csv(event, registrations, language),
            content_type="text/csv; charset=utf-8",
        )
        response["Content-Disposition"] = content_disposition_header(
            as_attachment=True, filename=export_filename(event)
        )
        return response

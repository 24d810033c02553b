from django.urls import path

from registrations.handlers import (
    AttendeeSummaryView,
    EventRegistrationListView,
    RegistrationDetailView,
    RegistrationExportView,
)

urlpatterns = [
    path(
        "events/<str:event_id>/registrations",
        EventRegistrationListView.as_view(),
        name="event-registration-list",
    ),
    path(
        "events/<str:event_id>/registrations/export",
        RegistrationExportView.as_view(),
        name="event-registration-export",
    ),
    path(
        "events/<str:event_id>/attendees/summary",
        AttendeeSummaryView.as_view(),
        name="attendee-summary",
    ),
    path(
        "registrations/<str:registration_id>",
        RegistrationDetailView.as_view(),
        name="registration-detail",
    ),
]

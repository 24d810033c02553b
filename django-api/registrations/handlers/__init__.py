from registrations.handlers.views import (
    AttendeeSummaryView,
    EventRegistrationListView,
    RegistrationDetailView,
    RegistrationExportView,
)

__all__ = [
    "AttendeeSummaryView",
    "EventRegistrationListView",
    "RegistrationDetailView",
    "RegistrationExportView",
]

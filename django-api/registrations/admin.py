from django.contrib import admin

from registrations.domain import RegistrationId
from registrations.models import Event, Registration
from registrations.stores.django_store import DjangoRegistrationStore


class RegistrationInline(admin.TabularInline):
    model = Registration
    extra = 0
    fields = ["name", "email", "party_size", "language", "created_at"]
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "starts_at", "location", "max_attendees", "current_attendees", "status"]
    list_filter = ["status"]
    search_fields = ["title", "location"]
    readonly_fields = ["current_attendees", "created_at"]
    inlines = [RegistrationInline]


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    """Registrations are read-only here; deleting one cancels it through the store."""

    list_display = ["name", "event", "party_size", "email", "created_at"]
    list_filter = ["event"]
    search_fields = ["name", "email"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def delete_model(self, request, obj):
        DjangoRegistrationStore().apply_cancel(RegistrationId(obj.pk))

    def delete_queryset(self, request, queryset):
        store = DjangoRegistrationStore()
        for pk in queryset.values_list("pk", flat=True):
            store.apply_cancel(RegistrationId(pk))

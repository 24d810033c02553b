"""Serializers for request validation and for rendering domain models."""

from django.conf import settings
from rest_framework import serializers

from registrations.domain import Contact, Language


class RegistrationCreateSerializer(serializers.Serializer):
    """Shape validation for new registrations.

    Runs before any capacity check; failures here are VALIDATION_FAILED.
    """

    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    comments = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    language = serializers.ChoiceField(
        choices=[language.value for language in Language],
        required=False,
    )
    party_size = serializers.IntegerField(min_value=1, required=False, allow_null=True)

    def validate_party_size(self, value: int | None) -> int | None:
        limit = settings.REGISTRATIONS["MAX_PARTY_SIZE"]
        if value is not None and value > limit:
            raise serializers.ValidationError(f"At most {limit} attendees per registration.")
        return value

    def to_contact(self) -> Contact:
        data = self.validated_data
        language = data.get("language") or settings.REGISTRATIONS["DEFAULT_LANGUAGE"]
        return Contact(
            name=data["name"],
            email=data["email"],
            phone=data.get("phone") or None,
            language=Language(language),
            comments=data.get("comments") or None,
        )


class RegistrationSerializer(serializers.Serializer):
    """Serializer for Registration domain model."""

    id = serializers.SerializerMethodField()
    event_id = serializers.SerializerMethodField()
    party_size = serializers.IntegerField()
    name = serializers.CharField(source="contact.name")
    email = serializers.CharField(source="contact.email")
    phone = serializers.CharField(source="contact.phone", allow_null=True)
    comments = serializers.CharField(source="contact.comments", allow_null=True)
    language = serializers.CharField(source="contact.language.value")
    created_at = serializers.DateTimeField()

    def get_id(self, obj) -> str:
        return str(obj.id)

    def get_event_id(self, obj) -> str:
        return str(obj.event_id)


class AttendeeSummarySerializer(serializers.Serializer):
    """Serializer for AttendeeSummary."""

    kind = serializers.CharField(source="kind.value")
    total = serializers.IntegerField()
    lines = serializers.ListField(child=serializers.CharField())

from django.urls import reverse
from rest_framework import serializers

from .models import (
    Building,
    Client,
    Elevator,
    Specialization,
    Technician,
    Ticket,
    TicketActivity,
    TicketAttachment,
)


class ClientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Client
        fields = [
            "id",
            "name",
            "contact_name",
            "phone",
            "email",
            "address",
            "notes",
            "is_active",
            "created_at",
        ]


class BuildingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Building
        fields = ["id", "client", "name", "address", "city", "notes"]


class ElevatorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Elevator
        fields = [
            "id",
            "building",
            "serial_number",
            "manufacturer",
            "model",
            "floors",
            "installed_on",
            "is_active",
        ]


class TechnicianSerializer(serializers.ModelSerializer):
    """Technician profile; unknown specializations are stored as ``other``."""

    class Meta:
        model = Technician
        fields = [
            "id",
            "full_name",
            "phone",
            "email",
            "specialization",
            "status",
            "emergency_contact_name",
            "emergency_contact_phone",
        ]

    def validate_specialization(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("Specialization must be a list.")
        coerced = []
        for tag in value:
            spec = Specialization.coerce(tag).value
            if spec not in coerced:
                coerced.append(spec)
        return coerced


class TicketSerializer(serializers.ModelSerializer):
    class Meta:
        model = Ticket
        fields = [
            "id",
            "title",
            "description",
            "elevator",
            "status",
            "severity",
            "assigned_to",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["status", "created_by", "created_at", "updated_at"]


class TicketActivitySerializer(serializers.ModelSerializer):
    class Meta:
        model = TicketActivity
        fields = [
            "id",
            "ticket",
            "activity_type",
            "description",
            "metadata",
            "created_by",
            "created_by_name",
            "created_at",
        ]
        read_only_fields = fields


class TicketAttachmentSerializer(serializers.ModelSerializer):
    download_url = serializers.SerializerMethodField()

    class Meta:
        model = TicketAttachment
        fields = [
            "id",
            "ticket",
            "file_name",
            "file_type",
            "file_size",
            "created_by",
            "created_at",
            "download_url",
        ]
        read_only_fields = fields

    def get_download_url(self, obj):
        return reverse(
            "ticket-attachment-download",
            kwargs={"pk": obj.ticket_id, "attachment_id": obj.pk},
        )

from rest_framework import serializers

from .models import (
    Project,
    ProjectMilestone,
    ProjectPriority,
    ProjectType,
)


class ProjectSerializer(serializers.ModelSerializer):
    """Project header; unknown type or priority tags fall back to defaults.

    Status and the actual dates move through the ``status`` action only.
    """

    project_type = serializers.CharField(required=False)
    priority = serializers.CharField(required=False)
    client_name = serializers.CharField(source="client.name", read_only=True)
    building_name = serializers.CharField(source="building.name", read_only=True)

    class Meta:
        model = Project
        fields = [
            "id",
            "project_number",
            "name",
            "description",
            "project_type",
            "status",
            "priority",
            "client",
            "client_name",
            "building",
            "building_name",
            "lead_technician",
            "estimated_start_date",
            "estimated_end_date",
            "actual_start_date",
            "actual_end_date",
            "estimated_budget",
            "approved_budget",
            "quoted_price",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "project_number",
            "status",
            "actual_start_date",
            "actual_end_date",
            "created_at",
            "updated_at",
        ]

    def validate_project_type(self, value):
        return ProjectType.coerce(value).value

    def validate_priority(self, value):
        return ProjectPriority.coerce(value).value


class ProjectMilestoneSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProjectMilestone
        fields = [
            "id",
            "name",
            "description",
            "due_date",
            "completed_date",
            "status",
            "order_index",
            "is_critical",
            "source",
            "created_at",
        ]
        read_only_fields = [
            "completed_date",
            "status",
            "order_index",
            "source",
            "created_at",
        ]

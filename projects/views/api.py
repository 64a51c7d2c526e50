from django.db.models import Q
from django.http import Http404
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from core.params import int_param
from core.roles import RolePermission

from ..models import Project
from ..serializers import ProjectMilestoneSerializer, ProjectSerializer
from ..services import project_service


def _service_data(validated):
    data = dict(validated)
    for field in ("client", "building", "lead_technician"):
        if field in data:
            data[f"{field}_id"] = getattr(data.pop(field), "pk", None)
    return data


class ProjectViewSet(viewsets.ModelViewSet):
    """Projects with status, milestone and summary actions.

    Query params:
        q: substring of the project number or name.
        status: exact status match.
        type: exact project type match.
        client: client id.
    """

    queryset = Project.objects.all().select_related("client", "building")
    serializer_class = ProjectSerializer
    permission_classes = [RolePermission]

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params
        q = (params.get("q") or "").strip()
        if q:
            queryset = queryset.filter(
                Q(name__icontains=q) | Q(project_number__icontains=q)
            )
        if params.get("status"):
            queryset = queryset.filter(status=params["status"])
        if params.get("type"):
            queryset = queryset.filter(project_type=params["type"])
        client_id = int_param(params, "client")
        if client_id is not None:
            queryset = queryset.filter(client_id=client_id)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        success, msg, project_id = project_service.create_project(
            _service_data(serializer.validated_data), actor=request.user
        )
        if not success:
            return Response({"detail": msg}, status=status.HTTP_400_BAD_REQUEST)
        project = self.get_queryset().get(pk=project_id)
        return Response(self.get_serializer(project).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        project = self.get_object()
        serializer = self.get_serializer(project, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        success, msg = project_service.update_project(
            project.pk, _service_data(serializer.validated_data)
        )
        if not success:
            return Response({"detail": msg}, status=status.HTTP_400_BAD_REQUEST)
        project = self.get_queryset().get(pk=project.pk)
        return Response(self.get_serializer(project).data)

    def perform_destroy(self, instance):
        project_service.delete_project(instance.pk)

    @action(detail=False, methods=["get"])
    def stats(self, request):
        return Response(project_service.project_stats())

    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        project = self.get_object()
        success, msg = project_service.change_status(
            project.pk, request.data.get("status", "")
        )
        code = status.HTTP_200_OK if success else status.HTTP_400_BAD_REQUEST
        return Response({"detail": msg}, status=code)

    @action(detail=True, methods=["get"])
    def summary(self, request, pk=None):
        """Progress, cost against budget, linked orders and the timeline."""
        project = self.get_object()
        detail = project_service.get_project_detail(project.pk)
        detail["project"] = self.get_serializer(detail["project"]).data
        detail["milestones"] = ProjectMilestoneSerializer(
            detail["milestones"], many=True
        ).data
        return Response(detail)

    @action(detail=True, methods=["get", "post"])
    def milestones(self, request, pk=None):
        project = self.get_object()
        if request.method == "POST":
            serializer = ProjectMilestoneSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            success, msg, milestone_id = project_service.add_milestone(
                project.pk, serializer.validated_data
            )
            if not success:
                return Response({"detail": msg}, status=status.HTTP_400_BAD_REQUEST)
            milestone = project.milestones.get(pk=milestone_id)
            return Response(
                ProjectMilestoneSerializer(milestone).data,
                status=status.HTTP_201_CREATED,
            )
        return Response(
            ProjectMilestoneSerializer(project.milestones.all(), many=True).data
        )

    @action(
        detail=True,
        methods=["post"],
        url_path=r"milestones/(?P<milestone_id>\d+)/status",
        url_name="milestone-status",
    )
    def milestone_status(self, request, pk=None, milestone_id=None):
        project = self.get_object()
        if not project.milestones.filter(pk=milestone_id).exists():
            raise Http404("Milestone not found")
        success, msg = project_service.update_milestone_status(
            project.pk, int(milestone_id), request.data.get("status", "")
        )
        if not success:
            return Response({"detail": msg}, status=status.HTTP_400_BAD_REQUEST)
        milestone = project.milestones.get(pk=milestone_id)
        return Response(ProjectMilestoneSerializer(milestone).data)

from django.http import FileResponse, Http404
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from core.params import int_param
from core.roles import FIELD_ROLES, RolePermission

from .models import Building, Client, Elevator, Technician, Ticket
from .serializers import (
    BuildingSerializer,
    ClientSerializer,
    ElevatorSerializer,
    TechnicianSerializer,
    TicketActivitySerializer,
    TicketAttachmentSerializer,
    TicketSerializer,
)
from .services import activity_service, attachment_service, ticket_service


class ClientViewSet(viewsets.ModelViewSet):
    """CRUD API for clients.

    Query params:
        name: optional substring to filter client names.
    """

    queryset = Client.objects.all()
    serializer_class = ClientSerializer
    permission_classes = [RolePermission]

    def get_queryset(self):
        queryset = super().get_queryset()
        name = self.request.query_params.get("name")
        if name:
            queryset = queryset.filter(name__icontains=name)
        return queryset


class BuildingViewSet(viewsets.ModelViewSet):
    queryset = Building.objects.all().select_related("client")
    serializer_class = BuildingSerializer
    permission_classes = [RolePermission]


class ElevatorViewSet(viewsets.ModelViewSet):
    queryset = Elevator.objects.all().select_related("building")
    serializer_class = ElevatorSerializer
    permission_classes = [RolePermission]


class TechnicianViewSet(viewsets.ModelViewSet):
    queryset = Technician.objects.all()
    serializer_class = TechnicianSerializer
    permission_classes = [RolePermission]


class TicketViewSet(viewsets.ModelViewSet):
    """Tickets with status/severity filters and activity feed actions.

    Query params:
        status: exact status match.
        severity: exact severity match.
        technician: assigned technician id.
    """

    queryset = Ticket.objects.all().select_related("elevator", "assigned_to")
    serializer_class = TicketSerializer
    permission_classes = [RolePermission]
    write_roles = FIELD_ROLES

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params
        if params.get("status"):
            queryset = queryset.filter(status=params["status"])
        if params.get("severity"):
            queryset = queryset.filter(severity=params["severity"])
        technician_id = int_param(params, "technician")
        if technician_id is not None:
            queryset = queryset.filter(assigned_to_id=technician_id)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        elevator = data.pop("elevator", None)
        data["elevator_id"] = elevator.pk if elevator else None
        success, msg, ticket_id = ticket_service.create_ticket(data, request.user)
        if not success:
            return Response({"detail": msg}, status=status.HTTP_400_BAD_REQUEST)
        ticket = Ticket.objects.get(pk=ticket_id)
        return Response(
            self.get_serializer(ticket).data, status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=["get"])
    def activities(self, request, pk=None):
        ticket = self.get_object()
        entries = activity_service.get_ticket_activities(ticket.pk)
        return Response(TicketActivitySerializer(entries, many=True).data)

    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        ticket = self.get_object()
        success, msg = ticket_service.update_ticket_status(
            ticket.pk, request.data.get("status", ""), actor=request.user
        )
        code = status.HTTP_200_OK if success else status.HTTP_400_BAD_REQUEST
        return Response({"detail": msg}, status=code)

    @action(detail=True, methods=["post"])
    def assign(self, request, pk=None):
        ticket = self.get_object()
        success, msg = ticket_service.assign_ticket(
            ticket.pk, request.data.get("technician"), actor=request.user
        )
        code = status.HTTP_200_OK if success else status.HTTP_400_BAD_REQUEST
        return Response({"detail": msg}, status=code)

    @action(detail=True, methods=["post"])
    def notes(self, request, pk=None):
        ticket = self.get_object()
        note = (request.data.get("note") or "").strip()
        if not note:
            return Response(
                {"detail": "Note cannot be empty."}, status=status.HTTP_400_BAD_REQUEST
            )
        entry = activity_service.log_note_added(ticket.pk, note, created_by=request.user)
        return Response(
            TicketActivitySerializer(entry).data, status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=["get", "post"])
    def attachments(self, request, pk=None):
        """``GET`` lists files; ``POST`` a multipart ``file`` to upload one."""
        ticket = self.get_object()
        if request.method == "POST":
            success, msg, attachment_id = attachment_service.upload_attachment(
                ticket.pk, request.FILES.get("file"), actor=request.user
            )
            if not success:
                return Response({"detail": msg}, status=status.HTTP_400_BAD_REQUEST)
            attachment = attachment_service.get_attachment(ticket.pk, attachment_id)
            return Response(
                TicketAttachmentSerializer(attachment).data,
                status=status.HTTP_201_CREATED,
            )
        entries = attachment_service.list_attachments(ticket.pk)
        return Response(TicketAttachmentSerializer(entries, many=True).data)

    @action(
        detail=True,
        methods=["delete"],
        url_path=r"attachments/(?P<attachment_id>\d+)",
        url_name="attachment-detail",
    )
    def delete_attachment(self, request, pk=None, attachment_id=None):
        ticket = self.get_object()
        if not attachment_service.delete_attachment(ticket.pk, int(attachment_id)):
            raise Http404("Attachment not found")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(
        detail=True,
        methods=["get"],
        url_path=r"attachments/(?P<attachment_id>\d+)/download",
        url_name="attachment-download",
    )
    def download_attachment(self, request, pk=None, attachment_id=None):
        ticket = self.get_object()
        attachment = attachment_service.get_attachment(ticket.pk, int(attachment_id))
        if attachment is None:
            raise Http404("Attachment not found")
        return FileResponse(
            attachment.file.open("rb"),
            as_attachment=True,
            filename=attachment.file_name,
            content_type=attachment.file_type or None,
        )

import logging

from django.db.models import F
from django.http import HttpResponse
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from core.params import int_param
from core.roles import FIELD_ROLES, RolePermission

from ..models import (
    CommunicationStatus,
    CommunicationType,
    Part,
    PartUsage,
    PurchaseOrder,
    PurchaseOrderItem,
    ReorderSuggestion,
    SuggestionStatus,
    Supplier,
)
from ..serializers import (
    PartSerializer,
    PartUsageInputSerializer,
    PartUsageSerializer,
    PurchaseOrderCreateSerializer,
    PurchaseOrderItemSerializer,
    PurchaseOrderSerializer,
    ReorderSuggestionSerializer,
    SendEmailSerializer,
    ShortfallSerializer,
    SuggestionsOrderSerializer,
    SupplierSerializer,
)
from ..services import (
    po_email_service,
    po_timeline_service,
    purchase_order_service,
    replenishment_service,
    supplier_service,
    usage_service,
)
from ..services.errors import InvalidInput
from ..services.usage_decision import Fulfilled, evaluate

logger = logging.getLogger(__name__)


def _usage_response(outcome):
    if outcome.fulfilled:
        return Response(
            {"result": "fulfilled", "usage": PartUsageSerializer(outcome.usage).data},
            status=status.HTTP_201_CREATED,
        )
    line = outcome.shortfall
    return Response(
        {
            "result": "shortfall",
            "shortfall": ShortfallSerializer(line).data,
            "detail": (
                f"Only part of the requested quantity is in stock; "
                f"{line.quantity} units were sent to purchasing."
            ),
        },
        status=status.HTTP_202_ACCEPTED,
    )


class PartViewSet(viewsets.ModelViewSet):
    """CRUD API for the parts catalogue.

    Query params:
        q: substring of part number, name or manufacturer.
        category: exact category.
        low_stock: when truthy, only parts at or below their reorder point.
    """

    queryset = Part.objects.all()
    serializer_class = PartSerializer
    permission_classes = [RolePermission]

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params
        q = (params.get("q") or "").strip()
        if q:
            queryset = (
                queryset.filter(part_number__icontains=q)
                | queryset.filter(name__icontains=q)
                | queryset.filter(manufacturer__icontains=q)
            )
        if params.get("category"):
            queryset = queryset.filter(category=params["category"])
        if (params.get("low_stock") or "").lower() in {"1", "true", "yes"}:
            queryset = queryset.filter(quantity_on_hand__lte=F("reorder_point"))
        return queryset

    @action(detail=True, methods=["get"], url_path="check-stock")
    def check_stock(self, request, pk=None):
        """Decision for ``?quantity=n`` without recording anything."""
        part = self.get_object()
        raw = request.query_params.get("quantity", "1")
        try:
            quantity = int(raw)
        except (TypeError, ValueError):
            raise InvalidInput("Quantity must be a whole number.", quantity=raw)
        decision = evaluate(part, quantity)
        data = {
            "part_id": part.pk,
            "requested": quantity,
            "quantity_on_hand": part.quantity_on_hand,
            "fulfilled": isinstance(decision, Fulfilled),
            "shortfall": 0 if isinstance(decision, Fulfilled) else decision.line.quantity,
        }
        return Response(data)


class SupplierViewSet(viewsets.ModelViewSet):
    queryset = Supplier.objects.all()
    serializer_class = SupplierSerializer
    permission_classes = [RolePermission]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        success, msg, supplier_id = supplier_service.add_supplier(
            dict(serializer.validated_data)
        )
        if not success:
            return Response({"detail": msg}, status=status.HTTP_400_BAD_REQUEST)
        supplier = Supplier.objects.get(pk=supplier_id)
        return Response(
            self.get_serializer(supplier).data, status=status.HTTP_201_CREATED
        )


class PurchaseOrderViewSet(viewsets.ModelViewSet):
    """Purchase orders with PDF, email, receipt and timeline actions.

    Query params:
        status: exact status match.
        supplier: supplier id.
    """

    queryset = PurchaseOrder.objects.all().select_related("supplier").prefetch_related(
        "items__part"
    )
    serializer_class = PurchaseOrderSerializer
    permission_classes = [RolePermission]

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params
        if params.get("status"):
            queryset = queryset.filter(status=params["status"])
        supplier_id = int_param(params, "supplier")
        if supplier_id is not None:
            queryset = queryset.filter(supplier_id=supplier_id)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = PurchaseOrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        items = [dict(i) for i in data.pop("items")]
        data["created_by"] = request.user
        success, msg, po_id = purchase_order_service.create_po(data, items)
        if not success:
            return Response({"detail": msg}, status=status.HTTP_400_BAD_REQUEST)
        po = self.get_queryset().get(pk=po_id)
        return Response(self.get_serializer(po).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"])
    def pdf(self, request, pk=None):
        po = self.get_object()
        try:
            content, filename = purchase_order_service.render_po_pdf(po.pk)
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        po_timeline_service.log_communication(
            po.pk,
            CommunicationType.PDF_DOWNLOADED,
            status=CommunicationStatus.SENT,
            metadata={"filename": filename},
            actor=request.user,
        )
        response = HttpResponse(content, content_type="application/pdf")
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response

    @action(detail=True, methods=["post"], url_path="send-email")
    def send_email(self, request, pk=None):
        po = self.get_object()
        serializer = SendEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        success, msg = po_email_service.send_purchase_order_email(
            po.pk,
            data["to"],
            cc=data.get("cc"),
            subject=data.get("subject"),
            message=data.get("message"),
            actor=request.user,
        )
        code = status.HTTP_200_OK if success else status.HTTP_400_BAD_REQUEST
        return Response({"success": success, "detail": msg}, status=code)

    @action(detail=True, methods=["post"])
    def receive(self, request, pk=None):
        """Body: ``{"items": {"<item id>": <quantity>, ...}}``."""
        po = self.get_object()
        success, msg = purchase_order_service.receive_items(
            po.pk, request.data.get("items") or {}, actor=request.user
        )
        code = status.HTTP_200_OK if success else status.HTTP_400_BAD_REQUEST
        return Response({"detail": msg}, status=code)

    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        po = self.get_object()
        success, msg = purchase_order_service.update_po_status(
            po.pk, request.data.get("status", ""), actor=request.user
        )
        code = status.HTTP_200_OK if success else status.HTTP_400_BAD_REQUEST
        return Response({"detail": msg}, status=code)

    @action(detail=True, methods=["get", "post"])
    def timeline(self, request, pk=None):
        po = self.get_object()
        if request.method == "POST":
            entry = po_timeline_service.add_note(
                po.pk, request.data.get("note", ""), actor=request.user
            )
            if entry is None:
                return Response(
                    {"detail": "Note cannot be empty."},
                    status=status.HTTP_400_BAD_REQUEST,
                )
        return Response(po_timeline_service.get_timeline(po.pk))


class PurchaseOrderItemViewSet(viewsets.ModelViewSet):
    queryset = PurchaseOrderItem.objects.all().select_related("purchase_order", "part")
    serializer_class = PurchaseOrderItemSerializer
    permission_classes = [RolePermission]


class PartUsageViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Parts used on tickets.

    Rows are created through the usage workflow and never edited. Deleting
    leaves stock untouched unless ``?restore_stock=1`` is passed.
    """

    queryset = PartUsage.objects.all().select_related("part", "technician")
    serializer_class = PartUsageSerializer
    permission_classes = [RolePermission]
    write_roles = FIELD_ROLES

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params
        ticket_id = int_param(params, "ticket")
        if ticket_id is not None:
            queryset = queryset.filter(ticket_id=ticket_id)
        part_id = int_param(params, "part")
        if part_id is not None:
            queryset = queryset.filter(part_id=part_id)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = PartUsageInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if "ticket" not in data:
            raise InvalidInput("A ticket is required.")
        outcome = usage_service.record_part_usage(
            data["part"],
            data["ticket"],
            data["quantity"],
            actor=request.user,
            unit_price=data.get("unit_price"),
            notes=data.get("notes"),
        )
        return _usage_response(outcome)

    def destroy(self, request, *args, **kwargs):
        usage = self.get_object()
        restore = (request.query_params.get("restore_stock") or "").lower() in {
            "1",
            "true",
            "yes",
        }
        usage_service.remove_part_usage(usage.pk, actor=request.user, restore_stock=restore)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TicketPartsUsageView(APIView):
    """``GET`` the parts used on a ticket, ``POST`` to use another part."""

    permission_classes = [RolePermission]
    write_roles = FIELD_ROLES

    def get(self, request, ticket_id):
        summary = usage_service.ticket_parts_summary(ticket_id)
        return Response(
            {
                "ticket_id": ticket_id,
                "usages": PartUsageSerializer(summary["usages"], many=True).data,
                "total_quantity": summary["total_quantity"],
                "total_cost": str(summary["total_cost"]),
            }
        )

    def post(self, request, ticket_id):
        serializer = PartUsageInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        outcome = usage_service.record_part_usage(
            data["part"],
            ticket_id,
            data["quantity"],
            actor=request.user,
            unit_price=data.get("unit_price"),
            notes=data.get("notes"),
        )
        return _usage_response(outcome)


class ReorderSuggestionViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = ReorderSuggestion.objects.all().select_related("part")
    serializer_class = ReorderSuggestionSerializer
    permission_classes = [RolePermission]

    def get_queryset(self):
        queryset = super().get_queryset()
        wanted = self.request.query_params.get("status", SuggestionStatus.OPEN)
        if wanted != "all":
            queryset = queryset.filter(status=wanted)
        return queryset

    @action(detail=True, methods=["post"])
    def dismiss(self, request, pk=None):
        success, msg = replenishment_service.dismiss_suggestion(pk)
        code = status.HTTP_200_OK if success else status.HTTP_400_BAD_REQUEST
        return Response({"detail": msg}, status=code)

    @action(detail=False, methods=["post"], url_path="create-po")
    def create_po(self, request):
        """Body: ``{"supplier": id, "suggestions": [ids]}``."""
        serializer = SuggestionsOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        success, msg, po_id = replenishment_service.create_po_from_suggestions(
            data["supplier"].pk, data["suggestions"], actor=request.user
        )
        if not success:
            return Response({"detail": msg}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {"detail": msg, "purchase_order": po_id}, status=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):
        return Response(replenishment_service.low_stock_suggestions())

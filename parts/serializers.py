from rest_framework import serializers

from .models import (
    Part,
    PartCategory,
    PartUsage,
    PurchaseOrder,
    PurchaseOrderCommunication,
    PurchaseOrderItem,
    ReorderSuggestion,
    Supplier,
)


class PartSerializer(serializers.ModelSerializer):
    """Catalogue entry with its current stock status."""

    stock_status = serializers.CharField(read_only=True)

    class Meta:
        model = Part
        fields = [
            "id",
            "part_number",
            "name",
            "category",
            "manufacturer",
            "unit_price",
            "quantity_on_hand",
            "minimum_stock_level",
            "reorder_point",
            "location",
            "is_active",
            "stock_status",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]

    def get_fields(self):
        fields = super().get_fields()
        # Opening stock only; afterwards stock moves through usage and receipts.
        if self.instance is not None:
            fields["quantity_on_hand"].read_only = True
        return fields

    def to_internal_value(self, data):
        if "category" in data and hasattr(data, "copy"):
            data = data.copy()
            data["category"] = PartCategory.coerce(data["category"]).value
        return super().to_internal_value(data)


class SupplierSerializer(serializers.ModelSerializer):
    supplier_code = serializers.CharField(required=False, allow_blank=True)

    class Meta:
        model = Supplier
        fields = [
            "id",
            "supplier_code",
            "company_name",
            "primary_contact_name",
            "primary_contact_phone",
            "email",
            "address",
            "city",
            "notes",
            "is_active",
            "updated_at",
        ]


class PurchaseOrderItemSerializer(serializers.ModelSerializer):
    part_number = serializers.CharField(source="part.part_number", read_only=True)
    part_name = serializers.CharField(source="part.name", read_only=True)
    total_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )

    class Meta:
        model = PurchaseOrderItem
        fields = [
            "id",
            "purchase_order",
            "part",
            "part_number",
            "part_name",
            "quantity_ordered",
            "quantity_received",
            "unit_price",
            "total_price",
            "notes",
        ]
        read_only_fields = ["quantity_received"]


class PurchaseOrderSerializer(serializers.ModelSerializer):
    """Purchase order header with its lines; edited through the actions."""

    supplier_name = serializers.CharField(
        source="supplier.company_name", read_only=True
    )
    items = PurchaseOrderItemSerializer(many=True, read_only=True)
    total_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, read_only=True
    )

    class Meta:
        model = PurchaseOrder
        fields = [
            "id",
            "po_number",
            "supplier",
            "supplier_name",
            "order_date",
            "expected_delivery_date",
            "status",
            "notes",
            "source_ticket",
            "project",
            "items",
            "total_amount",
            "created_at",
        ]
        read_only_fields = ["po_number", "status", "created_at"]


class PurchaseOrderLineInputSerializer(serializers.Serializer):
    part_id = serializers.IntegerField()
    quantity_ordered = serializers.IntegerField()
    unit_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, default=0
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class PurchaseOrderCreateSerializer(serializers.Serializer):
    supplier_id = serializers.IntegerField()
    order_date = serializers.DateField()
    expected_delivery_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    source_ticket_id = serializers.IntegerField(required=False, allow_null=True)
    project_id = serializers.IntegerField(required=False, allow_null=True)
    items = PurchaseOrderLineInputSerializer(many=True)


class SuggestionsOrderSerializer(serializers.Serializer):
    supplier = serializers.PrimaryKeyRelatedField(queryset=Supplier.objects.all())
    suggestions = serializers.ListField(
        child=serializers.IntegerField(), required=False, default=list
    )


class PurchaseOrderCommunicationSerializer(serializers.ModelSerializer):
    class Meta:
        model = PurchaseOrderCommunication
        fields = [
            "id",
            "purchase_order",
            "communication_type",
            "subject",
            "recipient_email",
            "status",
            "metadata",
            "created_by",
            "created_at",
        ]


class SendEmailSerializer(serializers.Serializer):
    to = serializers.ListField(child=serializers.CharField(), allow_empty=False)
    cc = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )
    subject = serializers.CharField(required=False, allow_blank=True)
    message = serializers.CharField(required=False, allow_blank=True)


class PartUsageSerializer(serializers.ModelSerializer):
    part_number = serializers.CharField(source="part.part_number", read_only=True)
    part_name = serializers.CharField(source="part.name", read_only=True)
    technician_name = serializers.CharField(
        source="technician.full_name", read_only=True, default=None
    )
    total_cost = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )

    class Meta:
        model = PartUsage
        fields = [
            "id",
            "part",
            "part_number",
            "part_name",
            "ticket",
            "technician",
            "technician_name",
            "quantity_used",
            "unit_price_at_use",
            "total_cost",
            "notes",
            "used_at",
        ]
        read_only_fields = fields


class PartUsageInputSerializer(serializers.Serializer):
    """Payload for recording a usage; quantity rules live in the service."""

    part = serializers.IntegerField()
    ticket = serializers.IntegerField(required=False)
    quantity = serializers.IntegerField()
    unit_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ShortfallSerializer(serializers.Serializer):
    part_id = serializers.IntegerField()
    part_number = serializers.CharField()
    part_name = serializers.CharField()
    ticket_id = serializers.IntegerField(allow_null=True)
    requested = serializers.IntegerField()
    quantity = serializers.IntegerField()


class ReorderSuggestionSerializer(serializers.ModelSerializer):
    part_number = serializers.CharField(source="part.part_number", read_only=True)
    part_name = serializers.CharField(source="part.name", read_only=True)

    class Meta:
        model = ReorderSuggestion
        fields = [
            "id",
            "part",
            "part_number",
            "part_name",
            "ticket",
            "quantity",
            "status",
            "purchase_order",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

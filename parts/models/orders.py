from decimal import Decimal

from django.conf import settings
from django.db import models

from .catalog import Part
from .suppliers import Supplier


class PurchaseOrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    ORDERED = "ordered", "Ordered"
    PARTIALLY_RECEIVED = "partially_received", "Partially received"
    RECEIVED = "received", "Received"
    CANCELLED = "cancelled", "Cancelled"


class PurchaseOrder(models.Model):
    """Order for parts sent to a supplier."""

    po_number = models.CharField(max_length=30, unique=True)
    supplier = models.ForeignKey(
        Supplier, models.PROTECT, related_name="purchase_orders"
    )
    order_date = models.DateField()
    expected_delivery_date = models.DateField(blank=True, null=True)
    status = models.CharField(
        max_length=20,
        choices=PurchaseOrderStatus.choices,
        default=PurchaseOrderStatus.PENDING,
    )
    notes = models.TextField(blank=True, null=True)
    source_ticket = models.ForeignKey(
        "tickets.Ticket",
        models.SET_NULL,
        blank=True,
        null=True,
        related_name="purchase_orders",
    )
    project = models.ForeignKey(
        "projects.Project",
        models.SET_NULL,
        blank=True,
        null=True,
        related_name="purchase_orders",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def total_amount(self) -> Decimal:
        return sum((i.total_price for i in self.items.all()), Decimal("0"))

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return f"{self.po_number} to {self.supplier}"

    class Meta:
        db_table = "purchase_orders"
        ordering = ["-order_date", "-id"]


class PurchaseOrderItem(models.Model):
    """Line item detailing quantity and price for a purchase order."""

    purchase_order = models.ForeignKey(
        PurchaseOrder, models.CASCADE, related_name="items"
    )
    part = models.ForeignKey(Part, models.PROTECT, related_name="order_lines")
    quantity_ordered = models.PositiveIntegerField()
    quantity_received = models.PositiveIntegerField(default=0)
    unit_price = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0")
    )
    notes = models.TextField(blank=True, null=True)

    @property
    def total_price(self) -> Decimal:
        return (self.unit_price or Decimal("0")) * self.quantity_ordered

    @property
    def remaining(self) -> int:
        return max(self.quantity_ordered - self.quantity_received, 0)

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return f"{self.purchase_order} - {self.part}"

    class Meta:
        db_table = "purchase_order_items"


class CommunicationType(models.TextChoices):
    EMAIL_SENT = "email_sent", "Email sent"
    EMAIL_OPENED = "email_opened", "Email opened"
    EMAIL_BOUNCED = "email_bounced", "Email failed"
    PDF_DOWNLOADED = "pdf_downloaded", "PDF downloaded"
    STATUS_CHANGE = "status_change", "Status change"
    NOTE = "note", "Note"


class CommunicationStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    SENT = "sent", "Sent"
    DELIVERED = "delivered", "Delivered"
    OPENED = "opened", "Opened"
    FAILED = "failed", "Failed"


class PurchaseOrderCommunication(models.Model):
    """Timeline entry for a purchase order (emails, downloads, notes)."""

    purchase_order = models.ForeignKey(
        PurchaseOrder, models.CASCADE, related_name="communications"
    )
    communication_type = models.CharField(
        max_length=20, choices=CommunicationType.choices
    )
    subject = models.CharField(max_length=255, blank=True, null=True)
    recipient_email = models.CharField(max_length=254, blank=True, null=True)
    status = models.CharField(
        max_length=20,
        choices=CommunicationStatus.choices,
        default=CommunicationStatus.PENDING,
    )
    metadata = models.JSONField(default=dict, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return f"{self.communication_type} for {self.purchase_order_id}"

    class Meta:
        db_table = "purchase_order_communications"
        ordering = ["-created_at", "-id"]

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from .catalog import Part


class PartUsage(models.Model):
    """A committed use of a part on a ticket.

    Rows are never edited. Deleting one leaves the part's stock untouched
    unless the caller restores it explicitly.
    """

    part = models.ForeignKey(Part, models.PROTECT, related_name="usages")
    ticket = models.ForeignKey(
        "tickets.Ticket", models.CASCADE, related_name="part_usages"
    )
    technician = models.ForeignKey(
        "tickets.Technician", models.SET_NULL, blank=True, null=True
    )
    quantity_used = models.PositiveIntegerField()
    unit_price_at_use = models.DecimalField(
        max_digits=10, decimal_places=2, blank=True, null=True
    )
    notes = models.TextField(blank=True, null=True)
    used_at = models.DateTimeField(default=timezone.now)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True
    )

    @property
    def total_cost(self) -> Decimal:
        return (self.unit_price_at_use or Decimal("0")) * self.quantity_used

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return f"{self.quantity_used} x {self.part} on ticket {self.ticket_id}"

    class Meta:
        db_table = "parts_usage"
        ordering = ["-used_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity_used__gte=1),
                name="parts_usage_quantity_positive",
            ),
        ]

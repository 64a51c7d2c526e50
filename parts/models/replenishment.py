from django.db import models
from django.db.models import Q

from .catalog import Part
from .orders import PurchaseOrder


class SuggestionStatus(models.TextChoices):
    OPEN = "open", "Open"
    ORDERED = "ordered", "Ordered"
    DISMISSED = "dismissed", "Dismissed"


class ReorderSuggestion(models.Model):
    """Candidate purchase-order line raised by a stock shortfall.

    At most one open suggestion exists per ``(part, ticket)`` pair; a newer
    shortfall for the same pair updates the quantity in place.
    """

    part = models.ForeignKey(Part, models.CASCADE, related_name="reorder_suggestions")
    ticket = models.ForeignKey(
        "tickets.Ticket",
        models.SET_NULL,
        blank=True,
        null=True,
        related_name="reorder_suggestions",
    )
    quantity = models.PositiveIntegerField()
    status = models.CharField(
        max_length=20, choices=SuggestionStatus.choices, default=SuggestionStatus.OPEN
    )
    purchase_order = models.ForeignKey(
        PurchaseOrder,
        models.SET_NULL,
        blank=True,
        null=True,
        related_name="suggestions",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return f"{self.quantity} x {self.part} ({self.status})"

    class Meta:
        db_table = "reorder_suggestions"
        ordering = ["-updated_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["part", "ticket"],
                condition=Q(status="open"),
                name="reorder_suggestions_one_open_per_part_ticket",
            ),
        ]

from django.db import models
from django.db.models import Q

from core.choices import CoercingChoices


class PartCategory(CoercingChoices):
    MOTOR = "motor", "Motor"
    CABLE = "cable", "Cables"
    DOOR = "door", "Doors"
    CONTROL = "control", "Control"
    SAFETY = "safety", "Safety"
    HYDRAULIC = "hydraulic", "Hydraulic"
    ELECTRICAL = "electrical", "Electrical"
    MECHANICAL = "mechanical", "Mechanical"
    OTHER = "other", "Other"


class StockStatus(models.TextChoices):
    OUT = "out", "Out of stock"
    LOW = "low", "Low stock"
    OK = "ok", "In stock"


class Part(models.Model):
    """A spare part and its on-hand stock.

    ``quantity_on_hand`` never goes below zero; the check constraint makes the
    database reject any write that would.
    """

    part_number = models.CharField(max_length=100, unique=True)
    name = models.CharField(max_length=255)
    category = models.CharField(
        max_length=30, choices=PartCategory.choices, default=PartCategory.OTHER
    )
    manufacturer = models.CharField(max_length=100, blank=True, null=True)
    unit_price = models.DecimalField(
        max_digits=10, decimal_places=2, blank=True, null=True
    )
    quantity_on_hand = models.PositiveIntegerField(default=0)
    minimum_stock_level = models.PositiveIntegerField(default=0)
    reorder_point = models.PositiveIntegerField(default=0)
    location = models.CharField(max_length=100, blank=True, default="")
    is_active = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def stock_status(self) -> str:
        if self.quantity_on_hand == 0:
            return StockStatus.OUT
        if self.quantity_on_hand <= self.minimum_stock_level:
            return StockStatus.LOW
        return StockStatus.OK

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return f"{self.part_number} {self.name}"

    class Meta:
        db_table = "parts"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity_on_hand__gte=0),
                name="parts_quantity_on_hand_non_negative",
            ),
        ]

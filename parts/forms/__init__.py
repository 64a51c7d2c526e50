from .base import StyledFormMixin
from .parts_forms import PartUsageForm
from .purchase_forms import (
    PurchaseOrderForm,
    PurchaseOrderItemForm,
    PurchaseOrderItemFormSet,
    SendPurchaseOrderForm,
)

__all__ = [
    "StyledFormMixin",
    "PartUsageForm",
    "PurchaseOrderForm",
    "PurchaseOrderItemForm",
    "PurchaseOrderItemFormSet",
    "SendPurchaseOrderForm",
]

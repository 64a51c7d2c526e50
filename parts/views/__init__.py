from .api import (
    PartUsageViewSet,
    PartViewSet,
    PurchaseOrderItemViewSet,
    PurchaseOrderViewSet,
    ReorderSuggestionViewSet,
    SupplierViewSet,
    TicketPartsUsageView,
)

__all__ = [
    "PartUsageViewSet",
    "PartViewSet",
    "PurchaseOrderItemViewSet",
    "PurchaseOrderViewSet",
    "ReorderSuggestionViewSet",
    "SupplierViewSet",
    "TicketPartsUsageView",
]

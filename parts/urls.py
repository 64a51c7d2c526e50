"""API routes for the parts app."""

from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import (
    PartUsageViewSet,
    PartViewSet,
    PurchaseOrderItemViewSet,
    PurchaseOrderViewSet,
    ReorderSuggestionViewSet,
    SupplierViewSet,
    TicketPartsUsageView,
)

router = DefaultRouter()
router.register(r"parts", PartViewSet)
router.register(r"suppliers", SupplierViewSet)
router.register(r"purchase-orders", PurchaseOrderViewSet)
router.register(r"purchase-order-items", PurchaseOrderItemViewSet)
router.register(r"part-usages", PartUsageViewSet)
router.register(r"reorder-suggestions", ReorderSuggestionViewSet)

urlpatterns = router.urls + [
    path(
        "tickets/<int:ticket_id>/parts-usage/",
        TicketPartsUsageView.as_view(),
        name="ticket_parts_usage_api",
    ),
]

from django.urls import path

from .views.parts import parts_export, parts_list, ticket_part_remove, ticket_parts
from .views.purchase_orders import (
    purchase_order_create,
    purchase_order_detail,
    purchase_order_pdf,
    purchase_order_send,
    purchase_orders_list,
)

urlpatterns = [
    path("parts/", parts_list, name="parts_list"),
    path("parts/export/", parts_export, name="parts_export"),
    path("tickets/<int:ticket_id>/parts/", ticket_parts, name="ticket_parts"),
    path(
        "tickets/<int:ticket_id>/parts/<int:usage_id>/remove/",
        ticket_part_remove,
        name="ticket_part_remove",
    ),
    path("purchase-orders/", purchase_orders_list, name="purchase_orders_list"),
    path("purchase-orders/new/", purchase_order_create, name="purchase_order_create"),
    path("purchase-orders/<int:pk>/", purchase_order_detail, name="purchase_order_detail"),
    path("purchase-orders/<int:pk>/pdf/", purchase_order_pdf, name="purchase_order_pdf"),
    path("purchase-orders/<int:pk>/send/", purchase_order_send, name="purchase_order_send"),
]

from django.contrib import admin

from .models import (
    Part,
    PartUsage,
    PurchaseOrder,
    PurchaseOrderCommunication,
    PurchaseOrderItem,
    ReorderSuggestion,
    Supplier,
)


@admin.register(Part)
class PartAdmin(admin.ModelAdmin):
    list_display = (
        "part_number",
        "name",
        "category",
        "quantity_on_hand",
        "reorder_point",
        "is_active",
    )
    list_filter = ("category", "is_active")
    search_fields = ("part_number", "name", "manufacturer")

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return ("quantity_on_hand",)
        return ()


@admin.register(PartUsage)
class PartUsageAdmin(admin.ModelAdmin):
    list_display = ("part", "ticket", "quantity_used", "unit_price_at_use", "used_at")
    raw_id_fields = ("part", "ticket")
    # stock only changes through the usage service
    readonly_fields = ("part", "ticket", "quantity_used")


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 0


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ("po_number", "supplier", "order_date", "status")
    list_filter = ("status",)
    search_fields = ("po_number", "supplier__company_name")
    inlines = [PurchaseOrderItemInline]


@admin.register(ReorderSuggestion)
class ReorderSuggestionAdmin(admin.ModelAdmin):
    list_display = ("part", "ticket", "quantity", "status", "updated_at")
    list_filter = ("status",)


admin.site.register(Supplier)
admin.site.register(PurchaseOrderCommunication)

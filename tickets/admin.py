from django.contrib import admin

from .models import (
    Building,
    Client,
    Elevator,
    Technician,
    Ticket,
    TicketActivity,
    TicketAttachment,
)


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "status", "severity", "assigned_to", "created_at")
    list_filter = ("status", "severity")
    search_fields = ("title",)


@admin.register(TicketActivity)
class TicketActivityAdmin(admin.ModelAdmin):
    list_display = ("ticket", "activity_type", "created_by_name", "created_at")
    list_filter = ("activity_type",)


@admin.register(TicketAttachment)
class TicketAttachmentAdmin(admin.ModelAdmin):
    list_display = ("file_name", "ticket", "file_type", "file_size", "created_at")
    raw_id_fields = ("ticket",)


for model in [Client, Building, Elevator, Technician]:
    admin.site.register(model)

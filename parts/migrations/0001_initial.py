import decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tickets", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Part",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("part_number", models.CharField(max_length=100, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("category", models.CharField(choices=[("motor", "Motor"), ("cable", "Cables"), ("door", "Doors"), ("control", "Control"), ("safety", "Safety"), ("hydraulic", "Hydraulic"), ("electrical", "Electrical"), ("mechanical", "Mechanical"), ("other", "Other")], default="other", max_length=30)),
                ("manufacturer", models.CharField(blank=True, max_length=100, null=True)),
                ("unit_price", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("quantity_on_hand", models.PositiveIntegerField(default=0)),
                ("minimum_stock_level", models.PositiveIntegerField(default=0)),
                ("reorder_point", models.PositiveIntegerField(default=0)),
                ("location", models.CharField(blank=True, default="", max_length=100)),
                ("is_active", models.BooleanField(default=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "parts",
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("quantity_on_hand__gte", 0)), name="parts_quantity_on_hand_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Supplier",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("supplier_code", models.CharField(max_length=20, unique=True)),
                ("company_name", models.CharField(max_length=255, unique=True)),
                ("primary_contact_name", models.CharField(blank=True, max_length=255, null=True)),
                ("primary_contact_phone", models.CharField(blank=True, max_length=30, null=True)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("address", models.TextField(blank=True, null=True)),
                ("city", models.CharField(blank=True, max_length=100, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"db_table": "suppliers", "ordering": ["company_name"]},
        ),
        migrations.CreateModel(
            name="PartUsage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity_used", models.PositiveIntegerField()),
                ("unit_price_at_use", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("used_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
                ("part", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="usages", to="parts.part")),
                ("technician", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="tickets.technician")),
                ("ticket", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="part_usages", to="tickets.ticket")),
            ],
            options={
                "db_table": "parts_usage",
                "ordering": ["-used_at", "-id"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("quantity_used__gte", 1)), name="parts_usage_quantity_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PurchaseOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("po_number", models.CharField(max_length=30, unique=True)),
                ("order_date", models.DateField()),
                ("expected_delivery_date", models.DateField(blank=True, null=True)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("ordered", "Ordered"), ("partially_received", "Partially received"), ("received", "Received"), ("cancelled", "Cancelled")], default="pending", max_length=20)),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
                ("source_ticket", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="purchase_orders", to="tickets.ticket")),
                ("supplier", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="purchase_orders", to="parts.supplier")),
            ],
            options={"db_table": "purchase_orders", "ordering": ["-order_date", "-id"]},
        ),
        migrations.CreateModel(
            name="PurchaseOrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity_ordered", models.PositiveIntegerField()),
                ("quantity_received", models.PositiveIntegerField(default=0)),
                ("unit_price", models.DecimalField(decimal_places=2, default=decimal.Decimal("0"), max_digits=10)),
                ("notes", models.TextField(blank=True, null=True)),
                ("part", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="order_lines", to="parts.part")),
                ("purchase_order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="parts.purchaseorder")),
            ],
            options={"db_table": "purchase_order_items"},
        ),
        migrations.CreateModel(
            name="PurchaseOrderCommunication",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("communication_type", models.CharField(choices=[("email_sent", "Email sent"), ("email_opened", "Email opened"), ("email_bounced", "Email failed"), ("pdf_downloaded", "PDF downloaded"), ("status_change", "Status change"), ("note", "Note")], max_length=20)),
                ("subject", models.CharField(blank=True, max_length=255, null=True)),
                ("recipient_email", models.CharField(blank=True, max_length=254, null=True)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("sent", "Sent"), ("delivered", "Delivered"), ("opened", "Opened"), ("failed", "Failed")], default="pending", max_length=20)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
                ("purchase_order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="communications", to="parts.purchaseorder")),
            ],
            options={"db_table": "purchase_order_communications", "ordering": ["-created_at", "-id"]},
        ),
        migrations.CreateModel(
            name="ReorderSuggestion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField()),
                ("status", models.CharField(choices=[("open", "Open"), ("ordered", "Ordered"), ("dismissed", "Dismissed")], default="open", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("part", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="reorder_suggestions", to="parts.part")),
                ("purchase_order", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="suggestions", to="parts.purchaseorder")),
                ("ticket", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="reorder_suggestions", to="tickets.ticket")),
            ],
            options={
                "db_table": "reorder_suggestions",
                "ordering": ["-updated_at", "-id"],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("status", "open")), fields=("part", "ticket"), name="reorder_suggestions_one_open_per_part_ticket"),
                ],
            },
        ),
    ]

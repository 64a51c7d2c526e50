import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Client",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, unique=True)),
                ("contact_name", models.CharField(blank=True, max_length=255, null=True)),
                ("phone", models.CharField(blank=True, max_length=30, null=True)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("address", models.TextField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"db_table": "clients", "ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="Building",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("address", models.CharField(blank=True, max_length=255, null=True)),
                ("city", models.CharField(blank=True, max_length=100, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("client", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="buildings", to="tickets.client")),
            ],
            options={"db_table": "buildings", "ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="Elevator",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("serial_number", models.CharField(max_length=100, unique=True)),
                ("manufacturer", models.CharField(blank=True, max_length=100, null=True)),
                ("model", models.CharField(blank=True, max_length=100, null=True)),
                ("floors", models.PositiveIntegerField(blank=True, null=True)),
                ("installed_on", models.DateField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("building", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="elevators", to="tickets.building")),
            ],
            options={"db_table": "elevators"},
        ),
        migrations.CreateModel(
            name="Technician",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("full_name", models.CharField(max_length=255)),
                ("phone", models.CharField(blank=True, max_length=30, null=True)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("specialization", models.JSONField(blank=True, default=list)),
                ("status", models.CharField(choices=[("active", "Active"), ("on_leave", "On leave"), ("inactive", "Inactive")], default="active", max_length=20)),
                ("emergency_contact_name", models.CharField(blank=True, max_length=255, null=True)),
                ("emergency_contact_phone", models.CharField(blank=True, max_length=30, null=True)),
                ("user", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="technician", to=settings.AUTH_USER_MODEL)),
            ],
            options={"db_table": "technicians", "ordering": ["full_name"]},
        ),
        migrations.CreateModel(
            name="Ticket",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, null=True)),
                ("status", models.CharField(choices=[("new", "New"), ("assigned", "Assigned"), ("in_progress", "In progress"), ("waiting_parts", "Waiting for parts"), ("done", "Done"), ("cancelled", "Cancelled")], default="new", max_length=20)),
                ("severity", models.CharField(choices=[("low", "Low"), ("medium", "Medium"), ("high", "High"), ("critical", "Critical")], default="medium", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("assigned_to", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="tickets", to="tickets.technician")),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
                ("elevator", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="tickets", to="tickets.elevator")),
            ],
            options={"db_table": "tickets", "ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="TicketActivity",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("activity_type", models.CharField(choices=[("created", "Created"), ("assigned", "Assigned"), ("status_changed", "Status changed"), ("severity_changed", "Severity changed"), ("note_added", "Note added"), ("technician_arrived", "Technician arrived"), ("technician_started", "Technician started"), ("part_used", "Part used"), ("part_shortfall", "Part shortfall"), ("file_attached", "File attached"), ("comment", "Comment")], max_length=30)),
                ("description", models.TextField()),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("created_by_name", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
                ("ticket", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="activities", to="tickets.ticket")),
            ],
            options={"db_table": "ticket_activities", "ordering": ["-created_at", "-id"]},
        ),
    ]

import django.db.models.deletion
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
            name="Project",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("project_number", models.CharField(max_length=30, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, null=True)),
                ("project_type", models.CharField(choices=[("modernization", "Modernization"), ("new_installation", "New installation"), ("component_replacement", "Component replacement"), ("renovation", "Renovation"), ("major_repair", "Major repair"), ("other", "Other")], default="modernization", max_length=30)),
                ("status", models.CharField(choices=[("planning", "Planning"), ("quotation", "Quotation"), ("approved", "Approved"), ("in_progress", "In progress"), ("on_hold", "On hold"), ("completed", "Completed"), ("cancelled", "Cancelled")], default="planning", max_length=20)),
                ("priority", models.CharField(choices=[("low", "Low"), ("medium", "Medium"), ("high", "High"), ("critical", "Critical")], default="medium", max_length=10)),
                ("estimated_start_date", models.DateField(blank=True, null=True)),
                ("estimated_end_date", models.DateField(blank=True, null=True)),
                ("actual_start_date", models.DateField(blank=True, null=True)),
                ("actual_end_date", models.DateField(blank=True, null=True)),
                ("estimated_budget", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("approved_budget", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("quoted_price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("building", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="projects", to="tickets.building")),
                ("client", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="projects", to="tickets.client")),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
                ("lead_technician", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="led_projects", to="tickets.technician")),
            ],
            options={"db_table": "projects", "ordering": ["-created_at", "-id"]},
        ),
        migrations.CreateModel(
            name="ProjectMilestone",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, null=True)),
                ("due_date", models.DateField()),
                ("completed_date", models.DateField(blank=True, null=True)),
                ("status", models.CharField(choices=[("not_started", "Not started"), ("in_progress", "In progress"), ("completed", "Completed"), ("cancelled", "Cancelled")], default="not_started", max_length=20)),
                ("order_index", models.PositiveIntegerField(default=1)),
                ("is_critical", models.BooleanField(default=False)),
                ("source", models.CharField(choices=[("manual", "Manual"), ("auto", "Automatic")], default="manual", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("project", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="milestones", to="projects.project")),
            ],
            options={"db_table": "project_milestones", "ordering": ["order_index", "id"]},
        ),
    ]

from django.conf import settings
from django.db import models

from core.choices import CoercingChoices


class ProjectType(CoercingChoices):
    MODERNIZATION = "modernization", "Modernization"
    NEW_INSTALLATION = "new_installation", "New installation"
    COMPONENT_REPLACEMENT = "component_replacement", "Component replacement"
    RENOVATION = "renovation", "Renovation"
    MAJOR_REPAIR = "major_repair", "Major repair"
    OTHER = "other", "Other"


class ProjectStatus(CoercingChoices):
    PLANNING = "planning", "Planning"
    QUOTATION = "quotation", "Quotation"
    APPROVED = "approved", "Approved"
    IN_PROGRESS = "in_progress", "In progress"
    ON_HOLD = "on_hold", "On hold"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"

    @classmethod
    def fallback(cls):
        return cls.PLANNING


ACTIVE_PROJECT_STATUSES = (
    ProjectStatus.PLANNING,
    ProjectStatus.QUOTATION,
    ProjectStatus.APPROVED,
    ProjectStatus.IN_PROGRESS,
    ProjectStatus.ON_HOLD,
)


class ProjectPriority(CoercingChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"
    CRITICAL = "critical", "Critical"

    @classmethod
    def fallback(cls):
        return cls.MEDIUM


class MilestoneStatus(CoercingChoices):
    NOT_STARTED = "not_started", "Not started"
    IN_PROGRESS = "in_progress", "In progress"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"

    @classmethod
    def fallback(cls):
        return cls.NOT_STARTED


class MilestoneSource(models.TextChoices):
    MANUAL = "manual", "Manual"
    AUTO = "auto", "Automatic"


class Project(models.Model):
    """A larger job at one building, e.g. a modernization or new install.

    Purchase orders can be booked against a project; their line totals make
    up the project's actual cost.
    """

    project_number = models.CharField(max_length=30, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    project_type = models.CharField(
        max_length=30, choices=ProjectType.choices, default=ProjectType.MODERNIZATION
    )
    status = models.CharField(
        max_length=20, choices=ProjectStatus.choices, default=ProjectStatus.PLANNING
    )
    priority = models.CharField(
        max_length=10, choices=ProjectPriority.choices, default=ProjectPriority.MEDIUM
    )
    client = models.ForeignKey(
        "tickets.Client", models.PROTECT, related_name="projects"
    )
    building = models.ForeignKey(
        "tickets.Building", models.PROTECT, related_name="projects"
    )
    lead_technician = models.ForeignKey(
        "tickets.Technician",
        models.SET_NULL,
        blank=True,
        null=True,
        related_name="led_projects",
    )
    estimated_start_date = models.DateField(blank=True, null=True)
    estimated_end_date = models.DateField(blank=True, null=True)
    actual_start_date = models.DateField(blank=True, null=True)
    actual_end_date = models.DateField(blank=True, null=True)
    estimated_budget = models.DecimalField(
        max_digits=12, decimal_places=2, blank=True, null=True
    )
    approved_budget = models.DecimalField(
        max_digits=12, decimal_places=2, blank=True, null=True
    )
    quoted_price = models.DecimalField(
        max_digits=12, decimal_places=2, blank=True, null=True
    )
    notes = models.TextField(blank=True, null=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def budget(self):
        """Approved budget, or the estimate while none is approved."""
        return self.approved_budget if self.approved_budget is not None else self.estimated_budget

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return f"{self.project_number} {self.name}"

    class Meta:
        db_table = "projects"
        ordering = ["-created_at", "-id"]


class ProjectMilestone(models.Model):
    project = models.ForeignKey(Project, models.CASCADE, related_name="milestones")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    due_date = models.DateField()
    completed_date = models.DateField(blank=True, null=True)
    status = models.CharField(
        max_length=20,
        choices=MilestoneStatus.choices,
        default=MilestoneStatus.NOT_STARTED,
    )
    order_index = models.PositiveIntegerField(default=1)
    is_critical = models.BooleanField(default=False)
    source = models.CharField(
        max_length=10, choices=MilestoneSource.choices, default=MilestoneSource.MANUAL
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return f"{self.project_id}: {self.name}"

    class Meta:
        db_table = "project_milestones"
        ordering = ["order_index", "id"]

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.choices import CoercingChoices


class TicketStatus(CoercingChoices):
    NEW = "new", "New"
    ASSIGNED = "assigned", "Assigned"
    IN_PROGRESS = "in_progress", "In progress"
    WAITING_PARTS = "waiting_parts", "Waiting for parts"
    DONE = "done", "Done"
    CANCELLED = "cancelled", "Cancelled"

    @classmethod
    def fallback(cls):
        return cls.NEW


class TicketSeverity(CoercingChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"
    CRITICAL = "critical", "Critical"

    @classmethod
    def fallback(cls):
        return cls.MEDIUM


class Specialization(CoercingChoices):
    MECHANICAL = "mechanical", "Mechanical"
    ELECTRICAL = "electrical", "Electrical"
    HYDRAULIC = "hydraulic", "Hydraulic"
    CONTROL = "control", "Control systems"
    DOORS = "doors", "Doors"
    OTHER = "other", "Other"


class TechnicianStatus(CoercingChoices):
    ACTIVE = "active", "Active"
    ON_LEAVE = "on_leave", "On leave"
    INACTIVE = "inactive", "Inactive"

    @classmethod
    def fallback(cls):
        return cls.INACTIVE


class Client(models.Model):
    """A customer company that owns or manages buildings."""

    name = models.CharField(max_length=255, unique=True)
    contact_name = models.CharField(max_length=255, blank=True, null=True)
    phone = models.CharField(max_length=30, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return self.name

    class Meta:
        db_table = "clients"
        ordering = ["name"]


class Building(models.Model):
    """A serviced site belonging to a client."""

    client = models.ForeignKey(Client, models.CASCADE, related_name="buildings")
    name = models.CharField(max_length=255)
    address = models.CharField(max_length=255, blank=True, null=True)
    city = models.CharField(max_length=100, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return self.name

    class Meta:
        db_table = "buildings"
        ordering = ["name"]


class Elevator(models.Model):
    building = models.ForeignKey(Building, models.CASCADE, related_name="elevators")
    serial_number = models.CharField(max_length=100, unique=True)
    manufacturer = models.CharField(max_length=100, blank=True, null=True)
    model = models.CharField(max_length=100, blank=True, null=True)
    floors = models.PositiveIntegerField(blank=True, null=True)
    installed_on = models.DateField(blank=True, null=True)
    is_active = models.BooleanField(default=True)

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return f"{self.serial_number} ({self.building})"

    class Meta:
        db_table = "elevators"


class Technician(models.Model):
    """Field technician who can be assigned to tickets."""

    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=30, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    specialization = models.JSONField(default=list, blank=True)
    status = models.CharField(
        max_length=20, choices=TechnicianStatus.choices, default=TechnicianStatus.ACTIVE
    )
    emergency_contact_name = models.CharField(max_length=255, blank=True, null=True)
    emergency_contact_phone = models.CharField(max_length=30, blank=True, null=True)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        models.SET_NULL,
        blank=True,
        null=True,
        related_name="technician",
    )

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return self.full_name

    class Meta:
        db_table = "technicians"
        ordering = ["full_name"]


class Ticket(models.Model):
    """A service call against an elevator."""

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    elevator = models.ForeignKey(
        Elevator, models.SET_NULL, blank=True, null=True, related_name="tickets"
    )
    status = models.CharField(
        max_length=20, choices=TicketStatus.choices, default=TicketStatus.NEW
    )
    severity = models.CharField(
        max_length=20, choices=TicketSeverity.choices, default=TicketSeverity.MEDIUM
    )
    assigned_to = models.ForeignKey(
        Technician, models.SET_NULL, blank=True, null=True, related_name="tickets"
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return f"#{self.pk} {self.title}"

    class Meta:
        db_table = "tickets"
        ordering = ["-created_at"]


class ActivityType(models.TextChoices):
    CREATED = "created", "Created"
    ASSIGNED = "assigned", "Assigned"
    STATUS_CHANGED = "status_changed", "Status changed"
    SEVERITY_CHANGED = "severity_changed", "Severity changed"
    NOTE_ADDED = "note_added", "Note added"
    TECHNICIAN_ARRIVED = "technician_arrived", "Technician arrived"
    TECHNICIAN_STARTED = "technician_started", "Technician started"
    PART_USED = "part_used", "Part used"
    PART_SHORTFALL = "part_shortfall", "Part shortfall"
    FILE_ATTACHED = "file_attached", "File attached"
    COMMENT = "comment", "Comment"


class TicketActivity(models.Model):
    """One entry in a ticket's activity feed."""

    ticket = models.ForeignKey(Ticket, models.CASCADE, related_name="activities")
    activity_type = models.CharField(max_length=30, choices=ActivityType.choices)
    description = models.TextField()
    metadata = models.JSONField(default=dict, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True
    )
    created_by_name = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return f"{self.activity_type} on {self.ticket_id}"

    class Meta:
        db_table = "ticket_activities"
        ordering = ["-created_at", "-id"]


def attachment_upload_to(instance, filename: str) -> str:
    return f"tickets/{instance.ticket_id}/{timezone.now():%Y%m%d%H%M%S}-{filename}"


class TicketAttachment(models.Model):
    """A photo, document or video uploaded against a ticket."""

    ticket = models.ForeignKey(Ticket, models.CASCADE, related_name="attachments")
    file = models.FileField(upload_to=attachment_upload_to, max_length=500)
    file_name = models.CharField(max_length=255)
    file_type = models.CharField(max_length=100, blank=True, default="")
    file_size = models.PositiveBigIntegerField(default=0)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, models.SET_NULL, blank=True, null=True
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return self.file_name

    class Meta:
        db_table = "ticket_attachments"
        ordering = ["-created_at", "-id"]

from django.db import models


class Supplier(models.Model):
    """Vendor that parts are ordered from."""

    supplier_code = models.CharField(max_length=20, unique=True)
    company_name = models.CharField(max_length=255, unique=True)
    primary_contact_name = models.CharField(max_length=255, blank=True, null=True)
    primary_contact_phone = models.CharField(max_length=30, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    city = models.CharField(max_length=100, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return self.company_name

    class Meta:
        db_table = "suppliers"
        ordering = ["company_name"]

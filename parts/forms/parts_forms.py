from django import forms

from ..models import Part
from .base import StyledFormMixin


class PartUsageForm(StyledFormMixin, forms.Form):
    """Add a part to a ticket.

    Quantity is only checked for being a number here; the usage service
    decides whether it is acceptable.
    """

    part = forms.ModelChoiceField(
        queryset=Part.objects.filter(is_active=True).order_by("name")
    )
    quantity = forms.IntegerField(initial=1)
    unit_price = forms.DecimalField(
        max_digits=10, decimal_places=2, required=False
    )
    notes = forms.CharField(widget=forms.Textarea, required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["part"].label_from_instance = (
            lambda p: f"{p.part_number} - {p.name} ({p.quantity_on_hand} on hand)"
        )

from django import forms

from ..models import PurchaseOrder, PurchaseOrderItem
from .base import StyledFormMixin


class PurchaseOrderForm(StyledFormMixin, forms.ModelForm):
    class Meta:
        model = PurchaseOrder
        fields = [
            "supplier",
            "order_date",
            "expected_delivery_date",
            "source_ticket",
            "project",
            "notes",
        ]
        widgets = {
            "order_date": forms.DateInput(attrs={"type": "date"}),
            "expected_delivery_date": forms.DateInput(attrs={"type": "date"}),
        }

    def clean(self):
        cleaned = super().clean()
        order_date = cleaned.get("order_date")
        expected = cleaned.get("expected_delivery_date")
        if order_date and expected and expected < order_date:
            self.add_error(
                "expected_delivery_date", "Delivery cannot be before the order date."
            )
        return cleaned


class PurchaseOrderItemForm(StyledFormMixin, forms.ModelForm):
    class Meta:
        model = PurchaseOrderItem
        fields = ["part", "quantity_ordered", "unit_price", "notes"]
        widgets = {"notes": forms.TextInput()}

    def clean_quantity_ordered(self):
        qty = self.cleaned_data.get("quantity_ordered")
        if qty is None or qty <= 0:
            raise forms.ValidationError("Quantity must be positive")
        return qty

    def clean_unit_price(self):
        price = self.cleaned_data.get("unit_price")
        if price is not None and price < 0:
            raise forms.ValidationError("Unit price cannot be negative")
        return price


PurchaseOrderItemFormSet = forms.inlineformset_factory(
    PurchaseOrder,
    PurchaseOrderItem,
    form=PurchaseOrderItemForm,
    fields=["part", "quantity_ordered", "unit_price", "notes"],
    extra=1,
    can_delete=True,
)


class SendPurchaseOrderForm(StyledFormMixin, forms.Form):
    to = forms.CharField(help_text="Separate several addresses with commas.")
    cc = forms.CharField(required=False)
    subject = forms.CharField(max_length=255)
    message = forms.CharField(widget=forms.Textarea)

from __future__ import annotations

from django import forms

INPUT_CLASS = "w-full px-3 py-2 border rounded"
CHECKBOX_CLASS = "h-4 w-4 text-primary"


class StyledFormMixin:
    """Give every widget the shared input classes."""

    def apply_styling(self) -> None:
        for field in self.fields.values():
            widget = field.widget
            if getattr(widget, "input_type", None) == "checkbox":
                widget.attrs["class"] = CHECKBOX_CLASS
            elif isinstance(widget, forms.Textarea):
                widget.attrs.setdefault("rows", 3)
                widget.attrs["class"] = INPUT_CLASS
            else:
                widget.attrs["class"] = INPUT_CLASS

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.apply_styling()

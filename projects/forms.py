from django import forms

from parts.forms.base import StyledFormMixin

from .models import Project, ProjectMilestone


class ProjectForm(StyledFormMixin, forms.ModelForm):
    class Meta:
        model = Project
        fields = [
            "name",
            "project_type",
            "priority",
            "client",
            "building",
            "lead_technician",
            "estimated_start_date",
            "estimated_end_date",
            "estimated_budget",
            "quoted_price",
            "description",
            "notes",
        ]
        widgets = {
            "estimated_start_date": forms.DateInput(attrs={"type": "date"}),
            "estimated_end_date": forms.DateInput(attrs={"type": "date"}),
        }

    def service_data(self):
        """Cleaned values keyed the way ``project_service`` expects them."""
        data = dict(self.cleaned_data)
        for field in ("client", "building", "lead_technician"):
            data[f"{field}_id"] = getattr(data.pop(field, None), "pk", None)
        return data


class MilestoneForm(StyledFormMixin, forms.ModelForm):
    class Meta:
        model = ProjectMilestone
        fields = ["name", "due_date", "is_critical", "description"]
        widgets = {"due_date": forms.DateInput(attrs={"type": "date"})}

from django.contrib import admin

from .models import Project, ProjectMilestone


class ProjectMilestoneInline(admin.TabularInline):
    model = ProjectMilestone
    extra = 0


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("project_number", "name", "client", "status", "priority", "created_at")
    list_filter = ("status", "project_type", "priority")
    search_fields = ("project_number", "name")
    readonly_fields = ("project_number",)
    inlines = [ProjectMilestoneInline]

from django.urls import path

from .views.pages import project_detail, projects_list

urlpatterns = [
    path("projects/", projects_list, name="projects_list"),
    path("projects/<int:pk>/", project_detail, name="project_detail"),
]

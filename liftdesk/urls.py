from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("parts.urls")),
    path("api/", include("tickets.urls")),
    path("api/", include("projects.urls")),
    path("", include("parts.ui_urls")),
    path("", include("projects.ui_urls")),
    path("", include("core.urls")),
]

from django.contrib.auth.views import LogoutView
from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .api import UserRoleViewSet, user_me
from .views import health_check, login_view, root_view, team_view

router = SimpleRouter()
router.register(r"users", UserRoleViewSet)

urlpatterns = [
    path("", root_view, name="root"),
    path("login/", login_view, name="login"),
    path("logout/", LogoutView.as_view(next_page="login"), name="logout"),
    path("healthz", health_check, name="healthz"),
    path("team/", team_view, name="team"),
    path("api/me/", user_me, name="user_me"),
    path("api/", include(router.urls)),
]

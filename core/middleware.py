import re

from django.conf import settings
from django.contrib.auth.views import redirect_to_login


class LoginRequiredMiddleware:
    """Send anonymous users to the login page.

    Paths matching ``LOGIN_EXEMPT_URLS`` pass through, and so do ``/api/``
    paths, where DRF answers with its own 401/403 instead of a redirect.
    """

    api_prefix = "api/"

    def __init__(self, get_response):
        self.get_response = get_response
        self.exempt_urls = [
            re.compile(expr) for expr in getattr(settings, "LOGIN_EXEMPT_URLS", [])
        ]

    def __call__(self, request):
        if request.user.is_authenticated:
            return self.get_response(request)
        path = request.path_info.lstrip("/")
        if path.startswith(self.api_prefix) or any(p.match(path) for p in self.exempt_urls):
            return self.get_response(request)
        return redirect_to_login(request.get_full_path(), settings.LOGIN_URL)

from django.contrib.auth import login
from django.http import HttpResponse

from accounts.models import User

import logging

logger = logging.getLogger(__name__)


# Stand-in for a real login flow: trust the X-User-NAME header on API calls
class MockLoginUserMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path.startswith("/api"):
            username = request.headers.get("X-User-NAME")
            if username:
                logger.info("Mock login for user: %s", username)
                try:
                    user = User.objects.get(username=username)
                except User.DoesNotExist:
                    return HttpResponse(
                        "User not found or invalid credentials.", status=401
                    )
                login(request, user)
        response = self.get_response(request)
        return response

from rest_framework.authentication import BaseAuthentication


class MiddlewareUserAuthentication(BaseAuthentication):
    """Hand the user logged in by MockLoginUserMiddleware to DRF views."""

    def authenticate(self, request):
        user = getattr(request._request, "user", None)
        if user is None or not user.is_authenticated:
            return None
        return (user, None)

    def authenticate_header(self, request):
        # A challenge makes DRF answer 401 rather than 403
        return "X-User-NAME"

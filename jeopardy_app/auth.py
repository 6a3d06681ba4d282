import base64
import binascii
import hmac
from functools import wraps

from django.conf import settings
from django.http import HttpResponse


def basic_auth_required(view_func):
    """
    Decorator that protects a view with HTTP Basic Authentication.
    Used for the Prometheus metrics endpoints.
    """

    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        if not settings.PROMETHEUS_METRICS_ENABLED:
            return HttpResponse("Metrics collection is disabled", status=404)

        auth_header = request.META.get("HTTP_AUTHORIZATION", "")
        auth_type, _, auth_string = auth_header.partition(" ")
        if auth_type.lower() != "basic" or not auth_string:
            return unauthorized_response()

        try:
            username, _, password = base64.b64decode(auth_string).decode("utf-8").partition(":")
        except (binascii.Error, UnicodeDecodeError):
            return unauthorized_response()

        if check_credentials(username, password):
            return view_func(request, *args, **kwargs)
        return unauthorized_response()

    return _wrapped_view


def check_credentials(username, password):
    expected_username = settings.PROMETHEUS_METRICS_AUTH_USERNAME
    expected_password = settings.PROMETHEUS_METRICS_AUTH_PASSWORD
    if not expected_username or not expected_password:
        return False
    return hmac.compare_digest(username.encode(), expected_username.encode()) and hmac.compare_digest(
        password.encode(), expected_password.encode()
    )


def unauthorized_response():
    """Return a 401 Unauthorized response with WWW-Authenticate header"""
    response = HttpResponse("Unauthorized: Authentication credentials were not provided or are invalid.", status=401)
    response["WWW-Authenticate"] = 'Basic realm="Jeopardy Metrics"'
    return response

"""
URL configuration for the jeopardy_api project.

    /                      board page (start control + grid)
    /new-game/             POST, load a fresh board for this session
    /cell/<c>/<q>/         POST, advance one cell's reveal state
    /api/...               JSON API (django-ninja)
    /metrics/              Prometheus export (basic auth)
"""

from django.urls import path
from django_prometheus import exports

import jeopardy_app.views
from jeopardy_app.auth import basic_auth_required

from .api import api


# Secured version of the django-prometheus export
@basic_auth_required
def secured_metrics_view(request):
    return exports.ExportToDjangoView(request)


urlpatterns = [
    path("", jeopardy_app.views.index, name="index"),
    path("new-game/", jeopardy_app.views.new_game, name="new-game"),
    path("cell/<int:category>/<int:question>/", jeopardy_app.views.reveal_cell, name="reveal-cell"),
    path("api/", api.urls),
    path("metrics/", jeopardy_app.views.metrics_view, name="metrics"),
    path("django_metrics", secured_metrics_view, name="django-metrics"),
]

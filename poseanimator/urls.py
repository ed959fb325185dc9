"""Root URL configuration for the pose animator Django project."""

from django.urls import include, path

urlpatterns = [
    path("api/", include("puppet.api.urls")),
]

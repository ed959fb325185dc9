"""URL routing for the pose animator API."""

from django.urls import path

from .views import AvatarView, CalibrateView, FrameView, ResetView

urlpatterns = [
    path("avatar/", AvatarView.as_view(), name="api_avatar"),
    path("frames/", FrameView.as_view(), name="api_frames"),
    path("calibrate/", CalibrateView.as_view(), name="api_calibrate"),
    path("reset/", ResetView.as_view(), name="api_reset"),
]

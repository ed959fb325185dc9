"""WSGI entrypoint for the pose animator project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "poseanimator.settings")

application = get_wsgi_application()

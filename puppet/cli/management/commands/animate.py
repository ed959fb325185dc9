"""Management command to animate a puppet from a video file."""

from __future__ import annotations

import argparse

from django.core.management.base import BaseCommand

from puppet.pipeline.runner import add_animate_arguments, run_animation


class Command(BaseCommand):
    help = "Drive a rigged SVG puppet from a video and write per-frame transforms."  # noqa: A003

    def add_arguments(self, parser) -> None:  # type: ignore[override]
        add_animate_arguments(parser)

    def handle(self, *args, **options) -> None:  # type: ignore[override]
        namespace = argparse.Namespace(**options)
        run_animation(namespace)

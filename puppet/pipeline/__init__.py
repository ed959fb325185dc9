"""Offline animation pipeline: video -> detector -> puppet transforms."""

from .runner import add_animate_arguments, build_config, run_animation

__all__ = ["add_animate_arguments", "build_config", "run_animation"]

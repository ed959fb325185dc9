"""Rig loading: SVG part hierarchy -> Skeleton.

Example:
    >>> from puppet.rig import Skeleton
    >>> skeleton = Skeleton.from_svg("avatars/girl.svg")
    >>> skeleton.bone_for("leftShoulder")
    12
"""

from .scene_graph import RestTransform, SceneNode, load_svg, parse_svg
from .skeleton import Bone, Skeleton

__all__ = [
    "Bone",
    "RestTransform",
    "SceneNode",
    "Skeleton",
    "load_svg",
    "parse_svg",
]

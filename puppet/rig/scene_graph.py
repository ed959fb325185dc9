"""Scene graph contract and a minimal SVG part-hierarchy loader.

The loader only recovers what the rig needs: the nesting of groups and
shapes, their ids and their placement (``transform`` attributes plus the
anchor of circles, ellipses and rects). Paths, styles and gradients are
left to the renderer.
"""

from __future__ import annotations

import math
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional

import numpy as np

from puppet.shared.exceptions import RigParseError

# Elements that become parts. Everything else (defs, style, metadata, ...)
# is skipped together with its subtree.
PART_TAGS = frozenset(
    ["svg", "g", "path", "circle", "ellipse", "rect", "line", "polyline", "polygon", "use", "image"]
)

_TRANSFORM_RE = re.compile(r"(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def translation_matrix(tx: float, ty: float) -> np.ndarray:
    return np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]])


def rotation_matrix(angle: float) -> np.ndarray:
    """Rotation by ``angle`` radians (y axis pointing down, as in SVG)."""
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def scale_matrix(sx: float, sy: float) -> np.ndarray:
    return np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])


@dataclass(frozen=True)
class RestTransform:
    """Decomposed 2D placement of a part: translate, rotate, then scale."""

    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    def to_matrix(self) -> np.ndarray:
        return (
            translation_matrix(self.x, self.y)
            @ rotation_matrix(self.rotation)
            @ scale_matrix(self.scale_x, self.scale_y)
        )

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> "RestTransform":
        """Decompose an affine matrix, ignoring any shear component."""
        a, c, tx = matrix[0]
        b, d, ty = matrix[1]
        scale_x = math.hypot(a, b)
        rotation = math.atan2(b, a)
        det = a * d - b * c
        scale_y = det / scale_x if scale_x else math.hypot(c, d)
        return cls(
            x=float(tx),
            y=float(ty),
            rotation=float(rotation),
            scale_x=float(scale_x),
            scale_y=float(scale_y),
        )


@dataclass
class SceneNode:
    """One part of the illustration.

    Attributes:
        name: Part id from the source (None for anonymous parts).
        transform: Placement relative to the parent part.
        children: Child parts in document (back to front) order.
    """

    name: Optional[str]
    transform: RestTransform = field(default_factory=RestTransform)
    children: List["SceneNode"] = field(default_factory=list)

    def add(self, child: "SceneNode") -> "SceneNode":
        self.children.append(child)
        return child

    def walk(self) -> Iterator["SceneNode"]:
        """Depth-first, parents before children."""
        yield self
        for child in self.children:
            yield from child.walk()


def parse_transform(value: str | None) -> np.ndarray:
    """Parse an SVG ``transform`` attribute into a 3x3 matrix."""
    matrix = np.eye(3)
    if not value:
        return matrix

    for name, raw_args in _TRANSFORM_RE.findall(value):
        args = [float(v) for v in _NUMBER_RE.findall(raw_args)]
        if name == "matrix":
            if len(args) != 6:
                raise RigParseError(f"matrix() expects 6 values, got {len(args)}: {value!r}")
            a, b, c, d, e, f = args
            step = np.array([[a, c, e], [b, d, f], [0.0, 0.0, 1.0]])
        elif name == "translate":
            tx = args[0] if args else 0.0
            ty = args[1] if len(args) > 1 else 0.0
            step = translation_matrix(tx, ty)
        elif name == "scale":
            sx = args[0] if args else 1.0
            sy = args[1] if len(args) > 1 else sx
            step = scale_matrix(sx, sy)
        elif name == "rotate":
            angle = math.radians(args[0]) if args else 0.0
            step = rotation_matrix(angle)
            if len(args) == 3:
                cx, cy = args[1], args[2]
                step = translation_matrix(cx, cy) @ step @ translation_matrix(-cx, -cy)
        elif name == "skewX":
            step = np.eye(3)
            step[0, 1] = math.tan(math.radians(args[0]))
        else:
            step = np.eye(3)
            step[1, 0] = math.tan(math.radians(args[0]))
        matrix = matrix @ step
    return matrix


def _local_tag(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _anchor(element: ET.Element, tag: str) -> tuple[float, float]:
    """Point that marks where a shape sits in its parent's space."""
    if tag in ("circle", "ellipse"):
        return float(element.get("cx", 0.0)), float(element.get("cy", 0.0))
    if tag in ("rect", "use", "image"):
        return float(element.get("x", 0.0)), float(element.get("y", 0.0))
    return 0.0, 0.0


def _to_node(element: ET.Element) -> SceneNode | None:
    tag = _local_tag(element.tag)
    if tag not in PART_TAGS:
        return None

    try:
        matrix = parse_transform(element.get("transform"))
        ax, ay = _anchor(element, tag)
    except ValueError as exc:
        raise RigParseError(f"Invalid geometry on <{tag} id={element.get('id')!r}>: {exc}") from exc

    if ax or ay:
        matrix = matrix @ translation_matrix(ax, ay)

    node = SceneNode(name=element.get("id"), transform=RestTransform.from_matrix(matrix))
    for child in element:
        child_node = _to_node(child)
        if child_node is not None:
            node.add(child_node)
    return node


def parse_svg(text: str | bytes) -> SceneNode:
    """Build a scene graph from SVG markup."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise RigParseError(f"Illustration is not valid SVG: {exc}") from exc

    if _local_tag(root.tag) != "svg":
        raise RigParseError(f"Expected an <svg> root element, got <{_local_tag(root.tag)}>")

    node = _to_node(root)
    assert node is not None
    return node


def load_svg(path: Path | str) -> SceneNode:
    """Read an SVG file and build its scene graph."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Illustration not found: {path}")
    return parse_svg(path.read_bytes())

"""
Tests for the SVG part-hierarchy loader.
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from puppet.rig.scene_graph import RestTransform, load_svg, parse_svg, parse_transform
from puppet.shared.exceptions import RigParseError

from helpers import SVG_RIG


def test_parse_transform_translate_then_rotate():
    """Transform lists compose left to right."""
    matrix = parse_transform("translate(10, 20) rotate(90)")
    point = matrix @ np.array([1.0, 0.0, 1.0])

    assert np.allclose(point[:2], [10.0, 21.0])


def test_parse_transform_rotate_about_center():
    """rotate(a, cx, cy) keeps the center fixed."""
    matrix = parse_transform("rotate(180 5 5)")
    center = matrix @ np.array([5.0, 5.0, 1.0])
    corner = matrix @ np.array([0.0, 0.0, 1.0])

    assert np.allclose(center[:2], [5.0, 5.0])
    assert np.allclose(corner[:2], [10.0, 10.0])


def test_parse_transform_matrix_and_uniform_scale():
    matrix = parse_transform("matrix(1 0 0 1 3 4) scale(2)")
    point = matrix @ np.array([1.0, 1.0, 1.0])

    assert np.allclose(point[:2], [5.0, 6.0])


def test_parse_transform_rejects_short_matrix():
    with pytest.raises(RigParseError):
        parse_transform("matrix(1 0 0 1)")


def test_rest_transform_matrix_round_trip():
    """Decomposing a composed matrix recovers its components."""
    rest = RestTransform(x=12.0, y=-4.0, rotation=0.5, scale_x=2.0, scale_y=0.5)
    recovered = RestTransform.from_matrix(rest.to_matrix())

    assert abs(recovered.x - 12.0) < 1e-9
    assert abs(recovered.y + 4.0) < 1e-9
    assert abs(recovered.rotation - 0.5) < 1e-9
    assert abs(recovered.scale_x - 2.0) < 1e-9
    assert abs(recovered.scale_y - 0.5) < 1e-9


def test_parse_svg_builds_part_hierarchy():
    """Groups and shapes become nodes; defs are skipped."""
    root = parse_svg(SVG_RIG)

    assert root.name is None
    assert [child.name for child in root.children] == ["body", "head"]

    body, head = root.children
    assert [child.name for child in body.children] == [
        "torso",
        "leftUpperArm",
        "leftShoulder",
        "rightShoulder",
        "leftElbow",
    ]
    assert head.transform.position == (100.0, 60.0)
    assert [child.name for child in head.children] == ["leftEye", "rightEye", "mouth"]


def test_parse_svg_uses_shape_anchor():
    """Circles and ellipses sit at their center."""
    root = parse_svg(SVG_RIG)
    nodes = {node.name: node for node in root.walk()}

    assert nodes["leftShoulder"].transform.position == (80.0, 100.0)
    assert nodes["leftEye"].transform.position == (-10.0, -5.0)
    assert nodes["leftUpperArm"].transform.position == (80.0, 100.0)


def test_parse_svg_accepts_bytes():
    root = parse_svg(SVG_RIG.encode("utf-8"))
    assert len(list(root.walk())) == 12


def test_parse_svg_rotated_group():
    root = parse_svg(
        '<svg xmlns="http://www.w3.org/2000/svg"><g id="head" transform="rotate(30)"/></svg>'
    )
    assert abs(root.children[0].transform.rotation - math.radians(30)) < 1e-9


def test_parse_svg_invalid_markup():
    with pytest.raises(RigParseError):
        parse_svg("<svg><g></svg>")


def test_parse_svg_requires_svg_root():
    with pytest.raises(RigParseError, match="svg"):
        parse_svg("<html><body/></html>")


def test_parse_svg_invalid_geometry():
    with pytest.raises(RigParseError):
        parse_svg('<svg><circle id="head" cx="abc" cy="1"/></svg>')


def test_load_svg_from_file(tmp_path):
    path = tmp_path / "avatar.svg"
    path.write_text(SVG_RIG, encoding="utf-8")

    root = load_svg(path)

    assert [child.name for child in root.children] == ["body", "head"]


def test_load_svg_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_svg(tmp_path / "missing.svg")

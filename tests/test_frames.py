#!/usr/bin/env python3
# tests/test_frames.py

import numpy as np
import pytest

from conftest import helix_coordinates, strand_coordinates
from ribbonkit.domain.models import Frame
from ribbonkit.geometry import BSplineCurve, frames_along, minimize_twist


def assert_orthonormal(frame):
    basis = frame.basis()
    np.testing.assert_allclose(basis @ basis.T, np.eye(3), atol=1e-9)


def assert_right_handed(frame):
    np.testing.assert_allclose(np.cross(frame.tangent, frame.normal), frame.binormal, atol=1e-9)


def axis_frame(t, normal_sign=1.0, binormal_sign=1.0):
    return Frame(
        t=t,
        position=np.array([t, 0.0, 0.0]),
        tangent=np.array([1.0, 0.0, 0.0]),
        normal=np.array([0.0, normal_sign, 0.0]),
        binormal=np.array([0.0, 0.0, binormal_sign]),
    )


def test_helix_frames_are_orthonormal():
    curve = BSplineCurve.from_backbone(np.array(helix_coordinates(10)))
    frames = frames_along(curve, np.linspace(0.0, 1.0, 50))
    assert len(frames) == 50
    for frame in frames:
        assert_orthonormal(frame)
        assert_right_handed(frame)
        np.testing.assert_allclose(frame.position, curve.point_at(frame.t))


def test_straight_segment_uses_fallback_normal():
    curve = BSplineCurve.from_backbone(np.array(strand_coordinates(6)))
    frame = curve.frenet_frame_at(0.5)
    assert_orthonormal(frame)
    assert abs(frame.normal[0]) < 1e-9


def test_minimize_twist_removes_sign_flips():
    frames = [axis_frame(i * 0.1, normal_sign=(-1.0) ** i, binormal_sign=(-1.0) ** i) for i in range(6)]
    fixed = minimize_twist(frames)

    assert fixed[0] is frames[0]
    for previous, current in zip(fixed, fixed[1:]):
        assert np.dot(previous.normal, current.normal) >= 0
        assert np.dot(previous.binormal, current.binormal) >= 0
    for frame in fixed:
        assert_right_handed(frame)


def test_minimize_twist_binormal_only_flip():
    frames = [axis_frame(0.0), axis_frame(0.1, binormal_sign=-1.0)]
    fixed = minimize_twist(frames)
    np.testing.assert_allclose(fixed[1].normal, [0.0, 1.0, 0.0])
    np.testing.assert_allclose(fixed[1].binormal, [0.0, 0.0, 1.0])


def test_minimize_twist_along_curve():
    curve = BSplineCurve.from_backbone(np.array(helix_coordinates(12)))
    fixed = minimize_twist(frames_along(curve, np.linspace(0.0, 1.0, 120)))
    for previous, current in zip(fixed, fixed[1:]):
        assert np.dot(previous.normal, current.normal) >= 0
        assert np.dot(previous.binormal, current.binormal) >= 0


def test_minimize_twist_empty():
    assert minimize_twist([]) == []


def test_flipped_keeps_position_and_tangent():
    frame = axis_frame(0.4)
    flipped = frame.flipped()
    np.testing.assert_allclose(flipped.position, frame.position)
    np.testing.assert_allclose(flipped.tangent, frame.tangent)
    np.testing.assert_allclose(flipped.normal, -frame.normal)
    np.testing.assert_allclose(flipped.binormal, -frame.binormal)
    assert flipped.t == pytest.approx(0.4)

#!/usr/bin/env python3
# src/ribbonkit/geometry/extrusion.py

"""
Sweep 2D cross-sections along a frame sequence into an indexed triangle mesh.
"""

from typing import Sequence, Tuple

import numpy as np

from ..domain.models.frame import Frame
from ..domain.models.profile import CrossSectionProfile


def strip_indices(ring_count: int, ring_size: int, closed: bool = True) -> np.ndarray:
    """
    Triangle indices joining consecutive rings of equal size.

    Each edge (i, i+1) between ring r and ring r+1 becomes two triangles
    (i1, i2, i3) and (i2, i4, i3). Closed rings also join their last vertex
    to their first.

    Returns:
        uint32 array of length (ring_count - 1) * edges * 6
    """
    if ring_count < 2 or ring_size < 2:
        return np.zeros(0, dtype=np.uint32)

    edges = ring_size if closed else ring_size - 1
    i = np.arange(edges)
    nxt = (i + 1) % ring_size
    rows = np.arange(ring_count - 1)[:, None] * ring_size

    i1 = rows + i
    i2 = rows + nxt
    i3 = rows + ring_size + i
    i4 = rows + ring_size + nxt

    triangles = np.stack([i1, i2, i3, i2, i4, i3], axis=-1)
    return triangles.reshape(-1).astype(np.uint32)


def extrude_profiles(
    frames: Sequence[Frame], profiles: Sequence[CrossSectionProfile]
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Place one profile ring at each frame and stitch the rings together.

    A profile vertex (x, y) lands at ``position + x * normal + y * binormal``;
    its 2D normal is mapped the same way, without the position.

    Args:
        frames: m frames along the curve
        profiles: m profiles, all with the same vertex count n

    Returns:
        Tuple of (positions (m*n, 3), normals (m*n, 3), indices) where
        indices has (m-1)*n*6 entries for closed profiles
    """
    if len(frames) != len(profiles):
        raise ValueError(
            f"Need one profile per frame, got {len(frames)} frames and {len(profiles)} profiles"
        )
    if not frames:
        empty = np.zeros((0, 3), dtype=np.float64)
        return empty, empty.copy(), np.zeros(0, dtype=np.uint32)

    ring_size = len(profiles[0])
    if any(len(p) != ring_size for p in profiles):
        raise ValueError("All profiles in one extrusion must have the same vertex count")

    origins = np.array([f.position for f in frames])  # (m, 3)
    normals_3d = np.array([f.normal for f in frames])
    binormals_3d = np.array([f.binormal for f in frames])
    vertices_2d = np.array([p.vertices for p in profiles])  # (m, n, 2)
    normals_2d = np.array([p.normals for p in profiles])

    positions = (
        origins[:, None, :]
        + vertices_2d[:, :, 0:1] * normals_3d[:, None, :]
        + vertices_2d[:, :, 1:2] * binormals_3d[:, None, :]
    )
    normals = (
        normals_2d[:, :, 0:1] * normals_3d[:, None, :]
        + normals_2d[:, :, 1:2] * binormals_3d[:, None, :]
    )
    lengths = np.linalg.norm(normals, axis=2, keepdims=True)
    normals = normals / np.maximum(lengths, 1e-12)

    indices = strip_indices(len(frames), ring_size, profiles[0].closed)
    return positions.reshape(-1, 3), normals.reshape(-1, 3), indices


def polyline_indices(point_count: int) -> np.ndarray:
    """Line-segment indices (i, i+1) joining consecutive points."""
    if point_count < 2:
        return np.zeros(0, dtype=np.uint32)
    i = np.arange(point_count - 1)
    return np.stack([i, i + 1], axis=1).reshape(-1).astype(np.uint32)


def polyline_normals(points: np.ndarray) -> np.ndarray:
    """Per-point unit directions along a polyline, used as line normals."""
    points = np.asarray(points, dtype=np.float64)
    if len(points) < 2:
        return np.tile([0.0, 0.0, 1.0], (len(points), 1))
    directions = np.gradient(points, axis=0)
    lengths = np.linalg.norm(directions, axis=1, keepdims=True)
    fallback = np.array([[0.0, 0.0, 1.0]])
    return np.where(lengths > 1e-12, directions / np.maximum(lengths, 1e-12), fallback)

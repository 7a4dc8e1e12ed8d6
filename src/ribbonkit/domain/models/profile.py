#!/usr/bin/env python3
# src/ribbonkit/domain/models/profile.py

"""
Cross-section profiles swept along the backbone curve.

A profile is a polygon in the local (normal, binormal) plane: x scales the
frame normal, y scales the binormal. Each vertex carries an outward 2D normal
used for shading after extrusion.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np


class ProfileKind(Enum):
    CIRCLE = "circle"
    RECTANGLE = "rectangle"
    BLEND = "blend"


@dataclass(frozen=True, eq=False)
class CrossSectionProfile:
    """Ordered polygon with per-vertex outward normals."""

    kind: ProfileKind
    vertices: np.ndarray  # [k, 2]
    normals: np.ndarray  # [k, 2], unit length
    closed: bool = True

    def __post_init__(self):
        if self.vertices.shape != self.normals.shape or self.vertices.ndim != 2:
            raise ValueError("Profile vertices and normals must both have shape [k, 2]")
        if len(self.vertices) < 2:
            raise ValueError("A profile needs at least two vertices")

    def __len__(self) -> int:
        return len(self.vertices)

    @classmethod
    def circle(cls, sides: int, radius: float) -> "CrossSectionProfile":
        """Regular polygon approximating a circle."""
        if sides < 3:
            raise ValueError(f"A circular profile needs at least 3 sides, got {sides}")
        angles = 2 * np.pi * np.arange(sides) / sides
        unit = np.stack([np.cos(angles), np.sin(angles)], axis=1)
        return cls(ProfileKind.CIRCLE, unit * radius, unit.copy())

    @classmethod
    def rectangle(cls, width: float, thickness: float) -> "CrossSectionProfile":
        """Four-corner flat rectangle; width runs along the frame normal."""
        a = width / 2
        b = thickness / 2
        vertices = np.array([[-a, -b], [a, -b], [a, b], [-a, b]], dtype=np.float64)
        # Gradient of the inscribed ellipse, so broad faces shade as faces
        normals = vertices / np.array([a * a, b * b])
        normals /= np.linalg.norm(normals, axis=1, keepdims=True)
        return cls(ProfileKind.RECTANGLE, vertices, normals)

    def scaled(self, sx: float, sy: float = 1.0) -> "CrossSectionProfile":
        """Profile stretched along x and y; normals are re-derived for the new aspect."""
        vertices = self.vertices * np.array([sx, sy])
        normals = self.normals * np.array([sy, sx])
        lengths = np.linalg.norm(normals, axis=1, keepdims=True)
        normals = np.where(lengths > 1e-12, normals / np.maximum(lengths, 1e-12), self.normals)
        return CrossSectionProfile(self.kind, vertices, normals, self.closed)

    @staticmethod
    def blend(
        outgoing: "CrossSectionProfile",
        incoming: "CrossSectionProfile",
        outgoing_weight: float,
    ) -> "CrossSectionProfile":
        """
        Interpolate two profiles by index-modulo vertex pairing.

        The result has the incoming profile's vertex count; vertex i of the
        incoming profile is paired with vertex ``i % len(outgoing)``. Dissimilar
        shapes (a 12-gon into a rectangle) pair vertices that are not
        geometrically related, which shows as a twisted transition.
        """
        w = float(np.clip(outgoing_weight, 0.0, 1.0))
        idx = np.arange(len(incoming)) % len(outgoing)
        vertices = w * outgoing.vertices[idx] + (1 - w) * incoming.vertices
        normals = w * outgoing.normals[idx] + (1 - w) * incoming.normals
        lengths = np.linalg.norm(normals, axis=1, keepdims=True)
        normals = np.where(lengths > 1e-12, normals / np.maximum(lengths, 1e-12), incoming.normals)
        return CrossSectionProfile(ProfileKind.BLEND, vertices, normals, incoming.closed)

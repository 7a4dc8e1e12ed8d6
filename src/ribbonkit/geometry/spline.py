#!/usr/bin/env python3
# src/ribbonkit/geometry/spline.py

"""
Parametric curves through backbone control points.

Both curve types evaluate piecewise cubic spans over four consecutive control
points, with the global parameter t in [0, 1] spread evenly across spans.
Curves built with ``from_backbone`` carry one phantom control point at each
end, so residue k of n sits at t = k / (n - 1).
"""

import logging
from typing import Dict, Optional, Tuple

import numpy as np

from ..domain.errors import DegenerateFrameError, InsufficientBackboneError
from ..domain.models.frame import Frame

logger = logging.getLogger(__name__)

# Finite-difference step in parameter space
DELTA = 0.001
# Below this the curvature normal is treated as undefined
MIN_NORMAL_MAGNITUDE = 0.001
# Tangent cache keys are t rounded to this resolution
CACHE_RESOLUTION = 10000
DEFAULT_CACHE_SIZE = 4096

_WORLD_AXES = np.eye(3)


def _normalize(v: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(v)
    if norm < 1e-12:
        return v
    return v / norm


class Curve:
    """
    Base class for cubic curves over control points.

    Subclasses provide ``_weights(u)`` returning an (m, 4) array of basis
    weights for local parameters ``u``.
    """

    degree = 3

    def __init__(self, control_points, cache_size: int = DEFAULT_CACHE_SIZE):
        points = np.asarray(control_points, dtype=np.float64)
        if points.ndim != 2 or points.shape[1] != 3:
            raise ValueError(f"Control points must have shape (n, 3), got {points.shape}")
        if len(points) < self.degree + 1:
            raise InsufficientBackboneError(len(points), self.degree + 1)
        if not np.all(np.isfinite(points)):
            raise ValueError("Control points contain non-finite coordinates")

        self.control_points = points
        self._cache_size = cache_size
        self._tangent_cache: Dict[int, np.ndarray] = {}

    @classmethod
    def from_backbone(cls, points, tension: float = 0.3, **kwargs) -> "Curve":
        """
        Build a curve through backbone positions with phantom endpoints.

        Args:
            points: (n, 3) backbone positions, n >= 2
            tension: Extrapolation factor for the phantom endpoints

        Returns:
            Curve with n + 2 control points
        """
        points = np.asarray(points, dtype=np.float64)
        if len(points) < 2:
            raise InsufficientBackboneError(len(points), 2)
        start = points[0] + (points[0] - points[1]) * tension
        end = points[-1] + (points[-1] - points[-2]) * tension
        return cls(np.vstack([start, points, end]), **kwargs)

    @property
    def span_count(self) -> int:
        return len(self.control_points) - self.degree

    def _weights(self, u: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def points_at(self, parameters) -> np.ndarray:
        """Evaluate many parameters at once; returns an (m, 3) array."""
        t = np.clip(np.asarray(parameters, dtype=np.float64).reshape(-1), 0.0, 1.0)
        spans = self.span_count
        span = np.minimum(np.floor(t * spans).astype(int), spans - 1)
        u = t * spans - span
        weights = self._weights(u)  # (m, 4)
        offsets = span[:, None] + np.arange(4)[None, :]
        blocks = self.control_points[offsets]  # (m, 4, 3)
        return np.einsum("mk,mkd->md", weights, blocks)

    def point_at(self, t: float) -> np.ndarray:
        return self.points_at([t])[0]

    def tangent_at(self, t: float) -> np.ndarray:
        """Unit tangent by central difference, memoized per instance."""
        key = int(round(t * CACHE_RESOLUTION))
        cached = self._tangent_cache.get(key)
        if cached is not None:
            return cached.copy()

        ahead, behind = self.points_at([min(1.0, t + DELTA), max(0.0, t - DELTA)])
        tangent = _normalize(ahead - behind)
        if np.linalg.norm(tangent) < 0.5:
            # Coincident control points; fall back to the overall chord
            tangent = _normalize(self.control_points[-1] - self.control_points[0])
            if np.linalg.norm(tangent) < 0.5:
                tangent = _WORLD_AXES[0].copy()

        if len(self._tangent_cache) >= self._cache_size:
            self._tangent_cache.pop(next(iter(self._tangent_cache)))
        self._tangent_cache[key] = tangent
        return tangent.copy()

    def clear_cache(self) -> None:
        self._tangent_cache.clear()

    def _curvature_normal(self, t: float) -> np.ndarray:
        diff = self.tangent_at(min(1.0, t + DELTA)) - self.tangent_at(max(0.0, t - DELTA))
        magnitude = np.linalg.norm(diff)
        if magnitude < MIN_NORMAL_MAGNITUDE:
            raise DegenerateFrameError(f"Curvature normal vanishes at t={t:.4f}")
        return diff / magnitude

    @staticmethod
    def _fallback_normal(tangent: np.ndarray) -> np.ndarray:
        """Normal perpendicular to the tangent and its least aligned world axis."""
        axis = _WORLD_AXES[int(np.argmin(np.abs(tangent)))]
        return _normalize(np.cross(tangent, axis))

    def frenet_frame_at(self, t: float) -> Frame:
        """
        Orthonormal frame at t.

        Straight stretches have no curvature normal; there the normal is
        chosen from the world axes instead.
        """
        tangent = self.tangent_at(t)
        try:
            normal = self._curvature_normal(t)
        except DegenerateFrameError as e:
            logger.debug(f"{e}; using axis fallback")
            normal = self._fallback_normal(tangent)

        binormal = np.cross(tangent, normal)
        if np.linalg.norm(binormal) < 1e-9:
            normal = self._fallback_normal(tangent)
            binormal = np.cross(tangent, normal)
        binormal = _normalize(binormal)
        normal = _normalize(np.cross(binormal, tangent))

        return Frame(
            t=float(t),
            position=self.point_at(t),
            tangent=tangent,
            normal=normal,
            binormal=binormal,
        )

    def _length_table(
        self, t0: float, t1: float, subdivisions: int
    ) -> Tuple[np.ndarray, np.ndarray]:
        ts = np.linspace(t0, t1, subdivisions + 1)
        points = self.points_at(ts)
        segments = np.linalg.norm(np.diff(points, axis=0), axis=1)
        return ts, np.concatenate([[0.0], np.cumsum(segments)])

    def arc_length(self, subdivisions: int = 100, t0: float = 0.0, t1: float = 1.0) -> float:
        """Polyline approximation of the length between t0 and t1."""
        _, cumulative = self._length_table(t0, t1, subdivisions)
        return float(cumulative[-1])

    def parameter_by_arc_length(self, target: float, subdivisions: int = 100) -> float:
        """Parameter at which the accumulated length from t=0 reaches target."""
        ts, cumulative = self._length_table(0.0, 1.0, subdivisions)
        target = float(np.clip(target, 0.0, cumulative[-1]))
        return float(np.interp(target, cumulative, ts))

    def uniform_parameters(
        self,
        count: int,
        t0: float = 0.0,
        t1: float = 1.0,
        subdivisions: int = 100,
    ) -> np.ndarray:
        """
        Parameters in [t0, t1] spaced evenly by arc length.

        Args:
            count: Number of parameters, endpoints included
            t0: Start of the sub-range
            t1: End of the sub-range
            subdivisions: Minimum resolution of the length table

        Returns:
            Array of ``count`` increasing parameters starting at t0 and ending at t1
        """
        if count < 1:
            return np.zeros(0)
        if count == 1:
            return np.array([float(t0)])
        ts, cumulative = self._length_table(t0, t1, max(subdivisions, 4 * count))
        total = cumulative[-1]
        if total < 1e-12:
            return np.linspace(t0, t1, count)
        result = np.interp(np.linspace(0.0, total, count), cumulative, ts)
        result[0], result[-1] = t0, t1
        return result

    def sample_uniform(self, count: int, subdivisions: int = 100) -> np.ndarray:
        """Positions of ``count`` arc-length-uniform samples along the whole curve."""
        return self.points_at(self.uniform_parameters(count, subdivisions=subdivisions))

    def curvature_at(self, t: float) -> float:
        """Approximate |dT/ds| at t."""
        lo, hi = max(0.0, t - DELTA), min(1.0, t + DELTA)
        dt = self.tangent_at(hi) - self.tangent_at(lo)
        ds = np.linalg.norm(self.point_at(hi) - self.point_at(lo))
        if ds < 1e-12:
            return 0.0
        return float(np.linalg.norm(dt) / ds)

    def bounds(self, samples: int = 100) -> Tuple[np.ndarray, np.ndarray]:
        """Axis-aligned (min, max) of the evaluated curve."""
        points = self.points_at(np.linspace(0.0, 1.0, samples + 1))
        return points.min(axis=0), points.max(axis=0)

    def __len__(self) -> int:
        return len(self.control_points)


class BSplineCurve(Curve):
    """Uniform cubic B-spline: C2-continuous, approximates its control points."""

    def _weights(self, u: np.ndarray) -> np.ndarray:
        u2 = u * u
        u3 = u2 * u
        return np.stack(
            [
                (-u3 + 3 * u2 - 3 * u + 1) / 6,
                (3 * u3 - 6 * u2 + 4) / 6,
                (-3 * u3 + 3 * u2 + 3 * u + 1) / 6,
                u3 / 6,
            ],
            axis=1,
        )


class CatmullRomCurve(Curve):
    """Catmull-Rom spline: C1-continuous, passes through interior control points."""

    def _weights(self, u: np.ndarray) -> np.ndarray:
        u2 = u * u
        u3 = u2 * u
        return 0.5 * np.stack(
            [
                -u + 2 * u2 - u3,
                2 - 5 * u2 + 3 * u3,
                u + 4 * u2 - 3 * u3,
                -u2 + u3,
            ],
            axis=1,
        )


CURVE_TYPES = {
    "bspline": BSplineCurve,
    "catmull_rom": CatmullRomCurve,
}


def build_curve(points, interpolation: str = "bspline", tension: float = 0.3,
                cache_size: Optional[int] = None) -> Curve:
    """Curve of the named interpolation type through backbone points."""
    try:
        curve_class = CURVE_TYPES[interpolation]
    except KeyError:
        raise ValueError(f"Unknown interpolation: {interpolation}") from None
    kwargs = {} if cache_size is None else {"cache_size": cache_size}
    return curve_class.from_backbone(points, tension=tension, **kwargs)

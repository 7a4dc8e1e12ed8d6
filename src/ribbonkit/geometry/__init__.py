"""Curve, frame and extrusion library."""

from .extrusion import extrude_profiles, polyline_indices, strip_indices
from .frames import frames_along, minimize_twist
from .spline import BSplineCurve, CatmullRomCurve, Curve, build_curve

__all__ = [
    "BSplineCurve",
    "CatmullRomCurve",
    "Curve",
    "build_curve",
    "extrude_profiles",
    "frames_along",
    "minimize_twist",
    "polyline_indices",
    "strip_indices",
]

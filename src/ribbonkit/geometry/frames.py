"""Frame sequences along a curve."""

from typing import Iterable, List

import numpy as np

from ..domain.models.frame import Frame
from .spline import Curve


def frames_along(curve: Curve, parameters: Iterable[float]) -> List[Frame]:
    """Frenet frames at each parameter, in order."""
    return [curve.frenet_frame_at(float(t)) for t in parameters]


def minimize_twist(frames: List[Frame]) -> List[Frame]:
    """
    Remove sign flips between consecutive frames.

    A frame whose normal points against the previous normal has both normal
    and binormal reversed; afterwards a binormal that still points against the
    previous binormal is reversed on its own. This only fixes sign flips:
    a genuine rotation near 90 degrees between two samples passes through
    unchanged and still shows as a twist.

    A binormal-only flip makes that frame left-handed, which inverts the
    winding of triangles built on it.

    Args:
        frames: Frames in curve order

    Returns:
        New list of frames; the first frame is kept as is
    """
    if not frames:
        return []

    result = [frames[0]]
    for frame in frames[1:]:
        previous = result[-1]
        if np.dot(frame.normal, previous.normal) < 0:
            frame = frame.flipped(normal=True, binormal=True)
        if np.dot(frame.binormal, previous.binormal) < 0:
            frame = frame.flipped(normal=False, binormal=True)
        result.append(frame)
    return result

"""Local coordinate frame along a curve."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class Frame:
    """Position plus orthonormal (tangent, normal, binormal) basis at parameter t."""

    t: float
    position: np.ndarray
    tangent: np.ndarray
    normal: np.ndarray
    binormal: np.ndarray

    def flipped(self, normal: bool = True, binormal: bool = True) -> "Frame":
        """Copy with the normal and/or binormal reversed."""
        return Frame(
            t=self.t,
            position=self.position,
            tangent=self.tangent,
            normal=-self.normal if normal else self.normal,
            binormal=-self.binormal if binormal else self.binormal,
        )

    def basis(self) -> np.ndarray:
        """Rows are tangent, normal, binormal."""
        return np.vstack([self.tangent, self.normal, self.binormal])

"""Per-vertex color assignment for mesh chunks."""

from typing import Tuple

import numpy as np
from matplotlib import colormaps
from matplotlib import colors as plt_colors

from ..config import ColorScheme, RibbonSettings
from ..domain.constants import CHAIN_COLORS, SECONDARY_STRUCTURE_COLORS
from ..domain.models.secondary_structure import SecondaryStructure

# Violet at the N-terminus, red at the C-terminus; the ends never share a color
RAINBOW_CMAP = colormaps["rainbow"]
CHAIN_CMAP = plt_colors.ListedColormap(CHAIN_COLORS)

RGB = Tuple[float, float, float]


def secondary_structure_color(label: SecondaryStructure) -> RGB:
    return SECONDARY_STRUCTURE_COLORS[label.value]


def chain_color(chain_index: int) -> RGB:
    rgba = CHAIN_CMAP(chain_index % CHAIN_CMAP.N)
    return tuple(float(c) for c in rgba[:3])


def rainbow_colors(fractions: np.ndarray) -> np.ndarray:
    """(m, 3) colors sampled from the rainbow colormap, fractions clamped to [0, 1]."""
    fractions = np.clip(np.asarray(fractions, dtype=np.float64), 0.0, 1.0)
    return np.asarray(RAINBOW_CMAP(fractions), dtype=np.float64).reshape(-1, 4)[:, :3]


def rainbow_color(fraction: float) -> RGB:
    """Color for one position along the chain, fraction in [0, 1]."""
    return tuple(float(c) for c in rainbow_colors(np.array([fraction]))[0])


class ColorMapper:
    """Builds flat RGBA buffers for the configured color scheme."""

    def __init__(self, settings: RibbonSettings):
        self.scheme = settings.color_scheme
        self.uniform_color = settings.uniform_color
        self.alpha = settings.alpha

    def ring_colors(
        self,
        label: SecondaryStructure,
        chain_index: int,
        sample_fractions: np.ndarray,
    ) -> np.ndarray:
        """
        One RGBA color per sample along a run.

        Args:
            label: Secondary structure of the run
            chain_index: Position of the chain in the structure
            sample_fractions: Position of each sample along the whole chain, in [0, 1]

        Returns:
            (m, 4) float32 array
        """
        count = len(sample_fractions)
        if self.scheme is ColorScheme.RAINBOW:
            rgb = rainbow_colors(sample_fractions)
        else:
            if self.scheme is ColorScheme.SECONDARY:
                color = secondary_structure_color(label)
            elif self.scheme is ColorScheme.CHAIN:
                color = chain_color(chain_index)
            else:
                color = self.uniform_color
            rgb = np.tile(np.asarray(color, dtype=np.float64), (count, 1))

        rgba = np.empty((count, 4), dtype=np.float32)
        rgba[:, :3] = rgb.reshape(count, 3)
        rgba[:, 3] = self.alpha
        return rgba

    def vertex_colors(
        self,
        label: SecondaryStructure,
        chain_index: int,
        sample_fractions: np.ndarray,
        ring_size: int,
    ) -> np.ndarray:
        """Ring colors repeated for every vertex of each ring, flattened."""
        rings = self.ring_colors(label, chain_index, sample_fractions)
        return np.repeat(rings, ring_size, axis=0).reshape(-1)

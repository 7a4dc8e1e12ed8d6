#!/usr/bin/env python3
# tests/test_coloring.py

import numpy as np
import pytest

from ribbonkit.config import RibbonSettings
from ribbonkit.domain.constants import CHAIN_COLORS
from ribbonkit.domain.models import SecondaryStructure
from ribbonkit.services.coloring import (
    ColorMapper,
    chain_color,
    rainbow_color,
    rainbow_colors,
    secondary_structure_color,
)

def test_secondary_structure_palette():
    assert secondary_structure_color(SecondaryStructure.HELIX) == (1.0, 0.0, 1.0)
    assert secondary_structure_color(SecondaryStructure.SHEET) == (0.0, 1.0, 1.0)
    assert secondary_structure_color(SecondaryStructure.COIL) == (1.0, 1.0, 0.0)

def test_chain_colors_cycle():
    assert chain_color(0) == pytest.approx(CHAIN_COLORS[0])
    assert chain_color(0) == chain_color(6)
    assert chain_color(1) != chain_color(0)

def test_rainbow_is_clamped():
    assert rainbow_color(-0.5) == pytest.approx(rainbow_color(0.0))
    assert rainbow_color(1.5) == pytest.approx(rainbow_color(1.0))

def test_rainbow_runs_violet_to_red():
    start = rainbow_color(0.0)
    end = rainbow_color(1.0)
    assert start[2] > start[0]
    assert end[0] > end[2]
    assert not np.allclose(start, end, atol=0.1)

def test_rainbow_colors_vectorised():
    fractions = np.linspace(0.0, 1.0, 5)
    colors = rainbow_colors(fractions)
    assert colors.shape == (5, 3)
    np.testing.assert_allclose(colors[2], rainbow_color(0.5))

@pytest.mark.parametrize("scheme", ["secondary", "chain", "rainbow", "uniform"])
def test_ring_colors_shape(scheme):
    mapper = ColorMapper(RibbonSettings(color_scheme=scheme, alpha=0.25))
    colors = mapper.ring_colors(SecondaryStructure.SHEET, 1, np.linspace(0.0, 1.0, 7))
    assert colors.shape == (7, 4)
    assert colors.dtype == np.float32
    assert np.all((colors >= 0.0) & (colors <= 1.0))
    np.testing.assert_allclose(colors[:, 3], 0.25)

def test_vertex_colors_repeat_per_ring():
    mapper = ColorMapper(RibbonSettings(color_scheme="rainbow"))
    flat = mapper.vertex_colors(SecondaryStructure.COIL, 0, np.array([0.0, 0.5]), 3)
    colors = flat.reshape(-1, 4)
    assert len(colors) == 6
    np.testing.assert_allclose(colors[0], colors[2])
    np.testing.assert_allclose(colors[3], colors[5])
    assert not np.allclose(colors[0], colors[3])

def test_empty_fractions():
    mapper = ColorMapper(RibbonSettings())
    assert mapper.ring_colors(SecondaryStructure.HELIX, 0, np.zeros(0)).shape == (0, 4)

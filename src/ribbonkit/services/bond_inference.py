#!/usr/bin/env python3
# src/ribbonkit/services/bond_inference.py

"""
Infer covalent bonds inside hetero-groups from interatomic distances.

Two atoms are bonded when their distance is above MIN_BOND_DISTANCE and below
BOND_TOLERANCE_FACTOR times the sum of their covalent radii.
"""

import logging
import warnings
from typing import Dict, List, Sequence

import numpy as np
from scipy.spatial import cKDTree
from scipy.spatial.distance import pdist, squareform

from ..domain.constants import (
    BOND_TOLERANCE_FACTOR,
    COVALENT_RADII,
    DEFAULT_COVALENT_RADIUS,
    MAX_PAIRWISE_LIGAND_ATOMS,
    MIN_BOND_DISTANCE,
)
from ..domain.errors import UnknownElementWarning
from ..domain.models.atom import Atom
from ..domain.models.ligand import LigandBond

logger = logging.getLogger(__name__)


def covalent_radius(element: str) -> float:
    """Covalent radius for an element symbol, carbon's when unknown."""
    symbol = element.strip().upper()
    radius = COVALENT_RADII.get(symbol)
    if radius is None:
        warnings.warn(
            f"No covalent radius for element {element!r}; using {DEFAULT_COVALENT_RADIUS}",
            UnknownElementWarning,
            stacklevel=2,
        )
        return DEFAULT_COVALENT_RADIUS
    return radius


def _radii(atoms: Sequence[Atom]) -> np.ndarray:
    cache: Dict[str, float] = {}
    radii = []
    for atom in atoms:
        if atom.element not in cache:
            cache[atom.element] = covalent_radius(atom.element)
        radii.append(cache[atom.element])
    return np.array(radii, dtype=np.float64)


def _pairwise_bonds(coords: np.ndarray, radii: np.ndarray) -> List[LigandBond]:
    """Full distance matrix; fine for small groups."""
    distances = squareform(pdist(coords))
    cutoffs = BOND_TOLERANCE_FACTOR * (radii[:, None] + radii[None, :])
    bonded = (distances > MIN_BOND_DISTANCE) & (distances < cutoffs)
    i_idx, j_idx = np.nonzero(np.triu(bonded, k=1))
    return [
        LigandBond(int(i), int(j), float(distances[i, j]))
        for i, j in zip(i_idx, j_idx)
    ]


def _tree_bonds(coords: np.ndarray, radii: np.ndarray) -> List[LigandBond]:
    """k-d tree neighbour search; only pairs within the largest possible cutoff are checked."""
    search_radius = BOND_TOLERANCE_FACTOR * 2 * float(radii.max())
    pairs = cKDTree(coords).query_pairs(r=search_radius, output_type="ndarray")
    if len(pairs) == 0:
        return []
    i_idx, j_idx = pairs[:, 0], pairs[:, 1]
    distances = np.linalg.norm(coords[i_idx] - coords[j_idx], axis=1)
    cutoffs = BOND_TOLERANCE_FACTOR * (radii[i_idx] + radii[j_idx])
    mask = (distances > MIN_BOND_DISTANCE) & (distances < cutoffs)

    bonds = [
        LigandBond(int(i), int(j), float(d))
        for i, j, d in zip(i_idx[mask], j_idx[mask], distances[mask])
    ]
    bonds.sort(key=lambda b: (b.atom1_index, b.atom2_index))
    return bonds


def infer_bonds(atoms: Sequence[Atom]) -> List[LigandBond]:
    """
    Bonds between atoms of one hetero-group.

    Args:
        atoms: Atoms of the group; bond indices refer to this order

    Returns:
        Bonds sorted by (atom1_index, atom2_index) with atom1_index < atom2_index
    """
    if len(atoms) < 2:
        return []
    coords = np.array([atom.coordinates for atom in atoms], dtype=np.float64)
    radii = _radii(atoms)
    if len(atoms) <= MAX_PAIRWISE_LIGAND_ATOMS:
        return _pairwise_bonds(coords, radii)
    logger.debug(f"Using k-d tree for bond inference over {len(atoms)} atoms")
    return _tree_bonds(coords, radii)

#!/usr/bin/env python3
# src/ribbonkit/domain/models/ligand.py

"""
Domain model representing a hetero-group (ligand) and its inferred bonds.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

import networkx as nx
import numpy as np

from .atom import Atom


@dataclass(frozen=True)
class LigandBond:
    """Covalent bond inferred between two ligand atoms (indices into the atom list)."""

    atom1_index: int
    atom2_index: int
    distance: float


@dataclass(eq=False)
class Ligand:
    """A non-polymer, non-water residue built from HETATM records."""

    chain_id: str
    residue_name: str
    residue_seq: int
    atoms: List[Atom] = field(default_factory=list)
    bonds: List[LigandBond] = field(default_factory=list)

    def get_coordinates(self) -> np.ndarray:
        """Get coordinates of all atoms.

        Returns:
            numpy array of shape (n_atoms, 3) containing xyz coordinates
        """
        if not self.atoms:
            return np.zeros((0, 3), dtype=np.float64)
        return np.array([atom.coordinates for atom in self.atoms], dtype=np.float64)

    @property
    def centroid(self) -> np.ndarray:
        return self.get_coordinates().mean(axis=0)

    @property
    def graph(self) -> nx.Graph:
        """Bond graph with atom indices as nodes."""
        G = nx.Graph()
        for index, atom in enumerate(self.atoms):
            G.add_node(
                index,
                name=atom.name,
                element=atom.element,
                coord=atom.coordinates,
            )
        for bond in self.bonds:
            G.add_edge(bond.atom1_index, bond.atom2_index, distance=bond.distance)
        return G

    def fragments(self) -> List[Tuple[int, ...]]:
        """Connected components of the bond graph, largest first."""
        components = [tuple(sorted(c)) for c in nx.connected_components(self.graph)]
        components.sort(key=lambda c: (-len(c), c))
        return components

    def to_dict(self) -> dict:
        return {
            "chainId": self.chain_id,
            "residueName": self.residue_name,
            "residueSeq": self.residue_seq,
            "atoms": [
                {"name": a.name, "element": a.element, "position": list(a.coordinates)}
                for a in self.atoms
            ],
            "bonds": [
                {"atoms": [b.atom1_index, b.atom2_index], "distance": round(b.distance, 4)}
                for b in self.bonds
            ],
        }

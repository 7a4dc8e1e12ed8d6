#!/usr/bin/env python3
# src/ribbonkit/domain/models/atom.py

"""
Domain model representing an atom parsed from a structure file.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class Atom:
    """Represents one ATOM/HETATM record. Immutable once parsed."""

    serial: int
    name: str
    residue_name: str
    chain_id: str
    residue_seq: int
    x: float
    y: float
    z: float
    alt_loc: str = ""
    insertion_code: str = ""
    occupancy: float = 1.0
    temp_factor: float = 0.0
    element: str = "C"
    charge: str = ""
    is_hetatm: bool = False

    @property
    def coordinates(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @property
    def position(self) -> np.ndarray:
        """Coordinates as a float64 vector."""
        return np.array(self.coordinates, dtype=np.float64)

    @property
    def residue_key(self) -> Tuple[str, int, str]:
        """Composite key used to group atoms into residues."""
        return (self.chain_id, self.residue_seq, self.insertion_code)

"""Domain model for a polymer chain."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

import numpy as np

from .residue import Residue


class ChainType(Enum):
    PROTEIN = "protein"
    NUCLEIC = "nucleic"
    OTHER = "other"


@dataclass(eq=False)
class Chain:
    """Ordered, non-ligand residues sharing a chain identifier."""

    id: str
    residues: List[Residue] = field(default_factory=list)
    type: ChainType = ChainType.OTHER

    def infer_type(self) -> ChainType:
        """Majority vote between protein and nucleic residue counts."""
        protein_count = sum(1 for r in self.residues if r.is_protein)
        nucleic_count = sum(1 for r in self.residues if r.is_nucleic)

        if protein_count > nucleic_count:
            self.type = ChainType.PROTEIN
        elif nucleic_count > 0:
            self.type = ChainType.NUCLEIC
        else:
            self.type = ChainType.OTHER
        return self.type

    def backbone_residues(self) -> List[Residue]:
        """Residues that carry a backbone atom, in chain order."""
        if self.type is ChainType.PROTEIN:
            return [r for r in self.residues if r.is_protein and r.ca is not None]
        if self.type is ChainType.NUCLEIC:
            return [r for r in self.residues if r.is_nucleic and r.backbone_atom is not None]
        return []

    def backbone_coordinates(self) -> np.ndarray:
        """Backbone trace as an (n, 3) array."""
        residues = self.backbone_residues()
        if not residues:
            return np.zeros((0, 3), dtype=np.float64)
        return np.array([r.backbone_atom.coordinates for r in residues], dtype=np.float64)

    def __len__(self) -> int:
        return len(self.residues)

#!/usr/bin/env python3
# src/ribbonkit/domain/models/structure.py

"""
Domain model for a parsed structure and its annotation records.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from ..errors import MalformedRecordError
from .atom import Atom
from .chain import Chain
from .ligand import Ligand
from .residue import Residue
from .secondary_structure import SecondaryStructure


@dataclass(frozen=True)
class Header:
    """HEADER record fields."""

    classification: str = ""
    deposition_date: str = ""
    id_code: str = ""


@dataclass(frozen=True)
class HelixRecord:
    """HELIX annotation spanning a residue range."""

    serial: str
    helix_class: int
    init_chain_id: str
    init_seq: int
    init_icode: str
    end_chain_id: str
    end_seq: int
    end_icode: str


@dataclass(frozen=True)
class SheetRecord:
    """SHEET annotation for a single strand."""

    strand: int
    sheet_id: str
    num_strands: int
    init_chain_id: str
    init_seq: int
    init_icode: str
    end_chain_id: str
    end_seq: int
    end_icode: str
    sense: int


@dataclass
class Structure:
    """Atoms, residues, chains and ligands from one parse call."""

    atoms: List[Atom] = field(default_factory=list)
    residues: List[Residue] = field(default_factory=list)
    chains: List[Chain] = field(default_factory=list)
    ligands: List[Ligand] = field(default_factory=list)
    header: Header = field(default_factory=Header)
    helices: List[HelixRecord] = field(default_factory=list)
    sheets: List[SheetRecord] = field(default_factory=list)
    parse_errors: List[MalformedRecordError] = field(default_factory=list)

    def chain(self, chain_id: str) -> Optional[Chain]:
        for chain in self.chains:
            if chain.id == chain_id:
                return chain
        return None

    def backbone(self, chain_id: str) -> List[Residue]:
        """Backbone-bearing residues of a chain, or an empty list."""
        chain = self.chain(chain_id)
        return chain.backbone_residues() if chain else []

    def get_coordinates(self) -> np.ndarray:
        if not self.atoms:
            return np.zeros((0, 3), dtype=np.float64)
        return np.array([atom.coordinates for atom in self.atoms], dtype=np.float64)

    def bounding_box(self) -> Dict[str, np.ndarray]:
        """Axis-aligned bounds of all atoms with center and size."""
        coords = self.get_coordinates()
        if len(coords) == 0:
            zero = np.zeros(3)
            return {"min": zero, "max": zero, "center": zero, "size": zero}
        lower = coords.min(axis=0)
        upper = coords.max(axis=0)
        return {
            "min": lower,
            "max": upper,
            "center": (lower + upper) / 2,
            "size": upper - lower,
        }

    def statistics(self) -> Dict[str, int]:
        labels = [r.secondary_structure for r in self.residues]
        return {
            "total_atoms": len(self.atoms),
            "total_residues": len(self.residues),
            "total_chains": len(self.chains),
            "helix_count": labels.count(SecondaryStructure.HELIX),
            "sheet_count": labels.count(SecondaryStructure.SHEET),
            "coil_count": labels.count(SecondaryStructure.COIL),
            "protein_residues": sum(1 for r in self.residues if r.is_protein),
            "nucleic_residues": sum(1 for r in self.residues if r.is_nucleic),
            "water_molecules": sum(1 for r in self.residues if r.is_water),
            "ligands": len(self.ligands),
        }

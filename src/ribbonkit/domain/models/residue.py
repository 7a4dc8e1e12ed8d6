#!/usr/bin/env python3
# src/ribbonkit/domain/models/residue.py

"""
Domain model representing a residue: the atoms sharing one
(chain, sequence number, insertion code) key.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..constants import (
    NUCLEIC_BACKBONE_ATOMS,
    NUCLEIC_RESIDUES,
    PROTEIN_BACKBONE_ATOMS,
    PROTEIN_RESIDUES,
    WATER_RESIDUES,
)
from .atom import Atom
from .secondary_structure import AssignmentSource, SecondaryStructure


def is_protein_residue(name: str) -> bool:
    return name.upper() in PROTEIN_RESIDUES


def is_nucleic_residue(name: str) -> bool:
    return name.upper() in NUCLEIC_RESIDUES


def is_water_residue(name: str) -> bool:
    return name.upper() in WATER_RESIDUES


@dataclass(eq=False)
class Residue:
    """A residue and its constituent atoms.

    Everything except the secondary structure fields is fixed after the
    parser builds the residue; the analyzer updates ``secondary_structure``,
    ``ss_confidence`` and ``ss_source`` in place.
    """

    chain_id: str
    seq: int
    insertion_code: str
    name: str
    atoms: List[Atom] = field(default_factory=list)
    secondary_structure: SecondaryStructure = SecondaryStructure.COIL
    ss_confidence: float = 0.0
    ss_source: AssignmentSource = AssignmentSource.NONE
    is_ligand: bool = False
    is_protein: bool = field(default=False, init=False)
    is_nucleic: bool = field(default=False, init=False)
    is_water: bool = field(default=False, init=False)
    _backbone: Dict[str, Atom] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        self.is_protein = is_protein_residue(self.name)
        self.is_nucleic = is_nucleic_residue(self.name)
        self.is_water = is_water_residue(self.name)
        self.cache_backbone()

    @property
    def key(self) -> Tuple[str, int, str]:
        return (self.chain_id, self.seq, self.insertion_code)

    def add_atom(self, atom: Atom) -> None:
        """Merge another atom under this residue key."""
        self.atoms.append(atom)

    def atom(self, name: str) -> Optional[Atom]:
        """
        Get atom by name, resolving alternate locations.

        Takes highest occupancy, tiebreaks by altloc ID order.
        """
        candidates = [atom for atom in self.atoms if atom.name == name]
        if not candidates:
            return None
        if len(candidates) == 1:
            return candidates[0]
        candidates.sort(key=lambda a: (-a.occupancy, a.alt_loc))
        return candidates[0]

    @property
    def atom_names(self) -> List[str]:
        """Distinct atom names in file order."""
        return list(dict.fromkeys(atom.name for atom in self.atoms))

    def cache_backbone(self) -> None:
        """Look up backbone atoms once so later stages get O(1) access."""
        self._backbone = {}
        lookup = {}
        if self.is_protein:
            lookup.update(PROTEIN_BACKBONE_ATOMS)
        if self.is_nucleic:
            lookup.update(NUCLEIC_BACKBONE_ATOMS)
        for attr, atom_name in lookup.items():
            atom = self.atom(atom_name)
            if atom is not None:
                self._backbone[attr] = atom

    @property
    def ca(self) -> Optional[Atom]:
        return self._backbone.get("ca")

    @property
    def c(self) -> Optional[Atom]:
        return self._backbone.get("c")

    @property
    def n(self) -> Optional[Atom]:
        return self._backbone.get("n")

    @property
    def o(self) -> Optional[Atom]:
        return self._backbone.get("o")

    @property
    def p(self) -> Optional[Atom]:
        return self._backbone.get("p")

    @property
    def c5_prime(self) -> Optional[Atom]:
        return self._backbone.get("c5_prime")

    @property
    def c3_prime(self) -> Optional[Atom]:
        return self._backbone.get("c3_prime")

    @property
    def c1_prime(self) -> Optional[Atom]:
        return self._backbone.get("c1_prime")

    @property
    def backbone_atom(self) -> Optional[Atom]:
        """Atom that traces the polymer path: CA for protein, P (or C3') for nucleic."""
        if self.is_protein:
            return self.ca
        if self.is_nucleic:
            return self.p or self.c3_prime
        return None

    @property
    def has_hetatm(self) -> bool:
        return any(atom.is_hetatm for atom in self.atoms)

    def __repr__(self) -> str:
        icode = self.insertion_code or ""
        return f"Residue({self.name} {self.chain_id}{self.seq}{icode}, {len(self.atoms)} atoms)"

"""Domain model classes."""

from .atom import Atom
from .chain import Chain, ChainType
from .frame import Frame
from .ligand import Ligand, LigandBond
from .mesh_chunk import MeshChunk, Primitive
from .profile import CrossSectionProfile, ProfileKind
from .residue import Residue
from .secondary_structure import (
    AssignmentSource,
    ChainSummary,
    SecondaryStructure,
    SecondaryStructureAssignment,
)
from .structure import Header, HelixRecord, SheetRecord, Structure

__all__ = [
    "Atom",
    "AssignmentSource",
    "Chain",
    "ChainSummary",
    "ChainType",
    "CrossSectionProfile",
    "Frame",
    "Header",
    "HelixRecord",
    "Ligand",
    "LigandBond",
    "MeshChunk",
    "Primitive",
    "ProfileKind",
    "Residue",
    "SecondaryStructure",
    "SecondaryStructureAssignment",
    "SheetRecord",
    "Structure",
]

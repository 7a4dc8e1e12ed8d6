"""Parsing, analysis and mesh generation services."""

from .cartoon_service import CartoonResult, CartoonService
from .ribbon_generator import RibbonGeometryGenerator
from .secondary_structure import SecondaryStructureAnalyzer, smooth_labels
from .structure_parser import PDBStructureParser, StructureBuilder

__all__ = [
    "CartoonResult",
    "CartoonService",
    "PDBStructureParser",
    "RibbonGeometryGenerator",
    "SecondaryStructureAnalyzer",
    "StructureBuilder",
    "smooth_labels",
]

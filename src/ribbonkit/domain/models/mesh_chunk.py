#!/usr/bin/env python3
# src/ribbonkit/domain/models/mesh_chunk.py

"""
Domain model for the renderer-facing geometry of one secondary-structure run.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .secondary_structure import SecondaryStructure


class Primitive(Enum):
    TRIANGLES = "triangles"
    LINES = "lines"


@dataclass(eq=False)
class MeshChunk:
    """Flat vertex/index buffers plus metadata describing what they cover.

    The generator keeps no reference to a chunk after returning it; the
    consumer owns the buffers.
    """

    positions: np.ndarray  # float32, 3 per vertex
    normals: np.ndarray  # float32, 3 per vertex
    colors: np.ndarray  # float32, RGBA per vertex
    indices: np.ndarray  # uint32
    chain_id: str
    secondary_structure: SecondaryStructure
    residue_range: Tuple[int, int]
    primitive: Primitive = Primitive.TRIANGLES
    representation: str = "cartoon"
    profile_kind: Optional[str] = None

    @property
    def vertex_count(self) -> int:
        return len(self.positions) // 3

    @property
    def triangle_count(self) -> int:
        if self.primitive is not Primitive.TRIANGLES:
            return 0
        return len(self.indices) // 3

    @property
    def metadata(self) -> dict:
        return {
            "chainId": self.chain_id,
            "secondaryStructure": self.secondary_structure.value,
            "residueRange": list(self.residue_range),
            "primitive": self.primitive.value,
            "representation": self.representation,
            "profile": self.profile_kind,
        }

    def to_dict(self) -> dict:
        return {
            "positions": self.positions.astype(float).round(4).tolist(),
            "normals": self.normals.astype(float).round(4).tolist(),
            "colors": self.colors.astype(float).round(4).tolist(),
            "indices": self.indices.astype(int).tolist(),
            "metadata": self.metadata,
        }

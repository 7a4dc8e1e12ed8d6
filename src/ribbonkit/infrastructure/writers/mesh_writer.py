"""Writers for generated cartoon payloads."""

import json
import logging
from pathlib import Path
from typing import Union

from ...domain.models.mesh_chunk import Primitive
from ...services.cartoon_service import CartoonResult

logger = logging.getLogger(__name__)


class MeshWriter:
    """Serializes a CartoonResult as JSON or Wavefront OBJ."""

    FORMATS = ("json", "obj")

    def write(self, result: CartoonResult, path: Union[str, Path], fmt: str = "json") -> Path:
        """
        Write a result in the given format.

        Args:
            result: Generated cartoon
            path: Output file path
            fmt: "json" or "obj"

        Returns:
            Path of the written file
        """
        if fmt == "json":
            return self.write_json(result, path)
        if fmt == "obj":
            return self.write_obj(result, path)
        raise ValueError(f"Unknown output format: {fmt}")

    @staticmethod
    def write_json(result: CartoonResult, path: Union[str, Path]) -> Path:
        path = Path(path)
        with open(path, "w") as f:
            json.dump(result.to_payload(), f)
        logger.debug(f"Wrote {len(result.chunks)} chunks to {path}")
        return path

    @staticmethod
    def write_obj(result: CartoonResult, path: Union[str, Path]) -> Path:
        """
        Wavefront OBJ with one object per chunk.

        Vertex colors follow each ``v`` line as r g b (the widely read
        extension); alpha is dropped. Line chunks are written as ``l``
        elements.
        """
        path = Path(path)
        offset = 1
        with open(path, "w") as f:
            header = result.structure.header
            f.write(f"# ribbonkit cartoon {header.id_code}".rstrip() + "\n")
            for number, chunk in enumerate(result.chunks, start=1):
                start, end = chunk.residue_range
                f.write(
                    f"o chain_{chunk.chain_id or '_'}_{chunk.secondary_structure.value}"
                    f"_{start}_{end}_{number}\n"
                )
                positions = chunk.positions.reshape(-1, 3)
                colors = chunk.colors.reshape(-1, 4)
                normals = chunk.normals.reshape(-1, 3)
                for (x, y, z), (r, g, b, _) in zip(positions, colors):
                    f.write(f"v {x:.4f} {y:.4f} {z:.4f} {r:.4f} {g:.4f} {b:.4f}\n")

                for nx, ny, nz in normals:
                    f.write(f"vn {nx:.4f} {ny:.4f} {nz:.4f}\n")

                if chunk.primitive is Primitive.TRIANGLES:
                    for a, b, c in chunk.indices.reshape(-1, 3) + offset:
                        f.write(f"f {a}//{a} {b}//{b} {c}//{c}\n")
                else:
                    for a, b in chunk.indices.reshape(-1, 2) + offset:
                        f.write(f"l {a} {b}\n")
                offset += chunk.vertex_count
        logger.debug(f"Wrote {len(result.chunks)} objects to {path}")
        return path

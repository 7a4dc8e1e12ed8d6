# src/ribbonkit/infrastructure/repositories/structure_repository.py
"""Repository implementation for structure files in a directory."""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Union

from ...domain.models.structure import Structure
from ...services.structure_parser import PDBStructureParser
from ..adapters.biopython_adapter import MMCIF_SUFFIXES, BiopythonStructureAdapter
from .base import Repository

logger = logging.getLogger(__name__)

# Longest suffixes first so "x.pdb.gz" is not taken as "x.pdb" + ".gz"
STRUCTURE_SUFFIXES = (".pdb.gz", ".ent.gz", ".pdb", ".ent", ".cif", ".mmcif")


def structure_id(path: Union[str, Path]) -> Optional[str]:
    """File name without its structure suffix, or None for other files."""
    name = os.path.basename(str(path))
    for suffix in STRUCTURE_SUFFIXES:
        if name.lower().endswith(suffix):
            return name[: -len(suffix)]
    return None


class StructureRepository(Repository[Structure]):
    """Repository for structure files, parsed on first access and cached."""

    def __init__(
        self,
        data_dir: Union[str, Path],
        parser: Optional[PDBStructureParser] = None,
        adapter: Optional[BiopythonStructureAdapter] = None,
    ):
        """
        Initialize repository with data directory.

        Args:
            data_dir: Directory containing .pdb, .ent, .pdb.gz or mmCIF files
            parser: Parser for fixed-column files
            adapter: Loader for mmCIF files
        """
        self._data_dir = Path(data_dir)
        self._parser = parser or PDBStructureParser()
        self._adapter = adapter or BiopythonStructureAdapter(self._parser.builder)
        self._cache: Dict[str, Structure] = {}

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, id: str) -> Optional[Path]:
        """First existing file for a structure ID."""
        for suffix in STRUCTURE_SUFFIXES:
            candidate = self._data_dir / f"{id}{suffix}"
            if candidate.is_file():
                return candidate
        return None

    def load(self, path: Union[str, Path]) -> Structure:
        """Parse a structure file by path, using the cache."""
        path = Path(path)
        key = str(path.resolve())
        if key in self._cache:
            return self._cache[key]

        if path.suffix.lower() in MMCIF_SUFFIXES:
            structure = self._adapter.load(path)
        else:
            structure = self._parser.parse_file(path)
        self._cache[key] = structure
        return structure

    def get(self, id: str) -> Optional[Structure]:
        """
        Retrieve a structure by ID.

        Args:
            id: File name without suffix

        Returns:
            Parsed Structure, or None if no file matches
        """
        path = self.path_for(id)
        if path is None:
            logger.debug(f"No structure file for {id} in {self._data_dir}")
            return None
        return self.load(path)

    def list(self) -> List[str]:
        """IDs of all structure files in the directory, sorted."""
        if not self._data_dir.is_dir():
            return []
        ids = set()
        for file_name in os.listdir(self._data_dir):
            id = structure_id(file_name)
            if id is not None and (self._data_dir / file_name).is_file():
                ids.add(id)
        return sorted(ids)

    def paths(self) -> List[Path]:
        """Files behind ``list()``, one per ID."""
        return [self.path_for(id) for id in self.list()]

    def clear_cache(self) -> None:
        self._cache.clear()

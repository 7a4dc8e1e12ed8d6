"""Structure repositories."""

from .base import Repository
from .structure_repository import StructureRepository

__all__ = ["Repository", "StructureRepository"]

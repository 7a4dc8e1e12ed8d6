"""Payload writers."""

from .mesh_writer import MeshWriter

__all__ = ["MeshWriter"]

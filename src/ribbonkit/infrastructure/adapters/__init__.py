"""Adapters for third-party structure readers."""

from .biopython_adapter import BiopythonStructureAdapter

__all__ = ["BiopythonStructureAdapter"]

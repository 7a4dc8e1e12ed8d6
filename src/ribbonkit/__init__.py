"""Cartoon and ribbon mesh generation for macromolecular structures."""

__version__ = "0.1.0"

#!/usr/bin/env python3
# src/ribbonkit/domain/errors.py

"""
Exception and warning taxonomy for the parse/analyze/generate pipeline.

None of these are fatal to a whole structure: each is scoped to the record,
chain or run that raised it, and callers collect partial results.
"""

from typing import Optional


class RibbonKitError(Exception):
    """Base class for all ribbonkit errors."""


class MalformedRecordError(RibbonKitError, ValueError):
    """A fixed-column record has a field that cannot be parsed."""

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        record: str = "",
        field: str = "",
    ):
        self.line_number = line_number
        self.record = record
        self.field = field
        location = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{location}{message}")


class InsufficientBackboneError(RibbonKitError):
    """Too few backbone points to build a curve or a mesh."""

    def __init__(self, count: int, required: int, chain_id: Optional[str] = None):
        self.count = count
        self.required = required
        self.chain_id = chain_id
        where = f" for chain {chain_id}" if chain_id is not None else ""
        super().__init__(
            f"Insufficient backbone points{where}: found {count}, need at least {required}"
        )


class DegenerateFrameError(RibbonKitError):
    """The curvature normal vanished, e.g. along a straight segment."""


class ConfigurationError(RibbonKitError, ValueError):
    """Invalid pipeline settings."""


class UnknownElementWarning(UserWarning):
    """Element symbol not found in a lookup table; carbon is used instead."""

#!/usr/bin/env python3
# src/ribbonkit/services/ribbon_generator.py

"""
Ribbon and cartoon mesh generation for one chain.

A single curve is fitted through the chain's backbone atoms. Every maximal
run of equal secondary structure labels becomes one MeshChunk: its share of
the curve is sampled uniformly by arc length, framed, and swept with the
cross-section for its label.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from ..config import RepresentationMode, RibbonSettings
from ..domain.errors import InsufficientBackboneError
from ..domain.models.chain import Chain
from ..domain.models.mesh_chunk import MeshChunk, Primitive
from ..domain.models.profile import CrossSectionProfile, ProfileKind
from ..domain.models.residue import Residue
from ..domain.models.secondary_structure import SecondaryStructure
from ..geometry.extrusion import (
    extrude_profiles,
    polyline_indices,
    polyline_normals,
)
from ..geometry.frames import frames_along, minimize_twist
from ..geometry.spline import build_curve
from .coloring import ColorMapper
from .secondary_structure import label_runs

logger = logging.getLogger(__name__)

MIN_BACKBONE_POINTS = 2


class RibbonGeometryGenerator:
    """Turns a labeled chain into mesh chunks, one per secondary structure run."""

    def __init__(self, settings: Optional[RibbonSettings] = None):
        self.settings = settings or RibbonSettings()
        self.settings.validate()
        self.colors = ColorMapper(self.settings)

    def profile_for(self, label: SecondaryStructure) -> CrossSectionProfile:
        """Base cross-section for a label under the current settings."""
        s = self.settings
        if label is SecondaryStructure.HELIX:
            return CrossSectionProfile.circle(s.helix_sides, s.helix_radius)
        if label is SecondaryStructure.SHEET:
            return CrossSectionProfile.rectangle(s.sheet_width, s.sheet_thickness)
        if s.coil_profile is ProfileKind.RECTANGLE:
            return CrossSectionProfile.rectangle(s.coil_width, s.coil_thickness)
        return CrossSectionProfile.circle(s.coil_sides, s.coil_radius)

    def run_profiles(
        self,
        label: SecondaryStructure,
        ring_count: int,
        arrow_start: Optional[int] = None,
        previous_label: Optional[SecondaryStructure] = None,
    ) -> List[CrossSectionProfile]:
        """
        One profile per ring of a run.

        Args:
            label: Label of the run
            ring_count: Number of rings in the run's chunk
            arrow_start: First ring of the sheet arrow head, if any
            previous_label: Label of the preceding run, for blending

        Returns:
            List of ``ring_count`` profiles with equal vertex counts
        """
        base = self.profile_for(label)
        profiles = [base] * ring_count

        if arrow_start is not None and ring_count - 1 > arrow_start:
            span = ring_count - 1 - arrow_start
            for j in range(arrow_start, ring_count):
                scale = self.settings.arrow_scale * (1.0 - (j - arrow_start) / span)
                profiles[j] = base.scaled(scale, 1.0)

        if previous_label is not None and previous_label is not label:
            outgoing = self.profile_for(previous_label)
            window = min(self.settings.blend_window, ring_count)
            for j in range(window):
                weight = (1.0 - self.settings.blend_factor) * (1.0 - j / self.settings.blend_window)
                profiles[j] = CrossSectionProfile.blend(outgoing, profiles[j], weight)

        return profiles

    @staticmethod
    def backbone_residues(chain: Chain, residues: Optional[Sequence[Residue]] = None) -> List[Residue]:
        """Residues that carry a backbone atom, in chain order."""
        if residues is None:
            return chain.backbone_residues()
        return [r for r in residues if r.backbone_atom is not None]

    def generate(
        self,
        chain: Chain,
        residues: Optional[Sequence[Residue]] = None,
        chain_index: int = 0,
        strict: bool = False,
    ) -> List[MeshChunk]:
        """
        Build the mesh chunks for a chain.

        Args:
            chain: Chain whose residues already carry secondary structure labels
            residues: Subset of the chain's residues to draw; all by default
            chain_index: Position of the chain, used by the chain color scheme
            strict: Raise instead of returning nothing for chains that are too short

        Returns:
            One MeshChunk per maximal run of equal labels

        Raises:
            InsufficientBackboneError: In strict mode, for fewer than two backbone points
        """
        residues = self.backbone_residues(chain, residues)
        if len(residues) < MIN_BACKBONE_POINTS:
            if strict:
                raise InsufficientBackboneError(len(residues), MIN_BACKBONE_POINTS, chain.id)
            logger.debug(f"Chain {chain.id}: {len(residues)} backbone points, nothing to draw")
            return []

        points = np.array([r.backbone_atom.coordinates for r in residues], dtype=np.float64)
        runs = label_runs([r.secondary_structure for r in residues])

        if self.settings.representation is RepresentationMode.TRACE:
            chunks = self._trace_chunks(chain, residues, points, runs, chain_index)
        else:
            chunks = self._extruded_chunks(chain, residues, points, runs, chain_index)

        logger.debug(
            f"Chain {chain.id}: {len(chunks)} chunks, "
            f"{sum(c.vertex_count for c in chunks)} vertices"
        )
        return chunks

    def _extruded_chunks(self, chain, residues, points, runs, chain_index) -> List[MeshChunk]:
        s = self.settings
        n = len(points)
        curve = build_curve(points, s.interpolation.value, s.tension)

        # Each run owns its samples up to, not including, the boundary it
        # shares with the next run; the last run keeps its end sample.
        owned = []
        for k, (_, a, b) in enumerate(runs):
            t0 = max(0.0, (a - 0.5) / (n - 1))
            t1 = min(1.0, (b + 0.5) / (n - 1))
            count = (b - a + 1) * s.samples_per_residue + 1
            params = curve.uniform_parameters(count, t0, t1, s.arc_length_subdivisions)
            owned.append(params if k == len(runs) - 1 else params[:-1])

        parameters = np.concatenate(owned)
        frames = minimize_twist(frames_along(curve, parameters))
        total = len(frames)
        offsets = np.concatenate([[0], np.cumsum([len(p) for p in owned])])

        chunks = []
        for k, (label, a, b) in enumerate(runs):
            start, stop = int(offsets[k]), int(offsets[k + 1])
            end = stop + 1 if k + 1 < len(runs) else stop
            run_frames = frames[start:end]
            ring_count = len(run_frames)

            arrow_start = None
            if (
                label is SecondaryStructure.SHEET
                and s.sheet_arrows
                and s.representation is RepresentationMode.CARTOON
            ):
                arrow_start = (b - a) * s.samples_per_residue
            previous_label = runs[k - 1][0] if k > 0 else None
            profiles = self.run_profiles(label, ring_count, arrow_start, previous_label)

            positions, normals, indices = extrude_profiles(run_frames, profiles)
            fractions = np.arange(start, end) / max(total - 1, 1)
            colors = self.colors.vertex_colors(label, chain_index, fractions, len(profiles[0]))

            chunks.append(
                MeshChunk(
                    positions=positions.astype(np.float32).reshape(-1),
                    normals=normals.astype(np.float32).reshape(-1),
                    colors=colors,
                    indices=indices,
                    chain_id=chain.id,
                    secondary_structure=label,
                    residue_range=(residues[a].seq, residues[b].seq),
                    primitive=Primitive.TRIANGLES,
                    representation=s.representation.value,
                    profile_kind=self.profile_for(label).kind.value,
                )
            )
        return chunks

    def _trace_chunks(self, chain, residues, points, runs, chain_index) -> List[MeshChunk]:
        n = len(points)
        chunks = []
        for k, (label, a, b) in enumerate(runs):
            end = b + 2 if k + 1 < len(runs) else b + 1
            run_points = points[a:end]
            fractions = np.arange(a, end) / (n - 1)
            chunks.append(
                MeshChunk(
                    positions=run_points.astype(np.float32).reshape(-1),
                    normals=polyline_normals(run_points).astype(np.float32).reshape(-1),
                    colors=self.colors.vertex_colors(label, chain_index, fractions, 1),
                    indices=polyline_indices(len(run_points)),
                    chain_id=chain.id,
                    secondary_structure=label,
                    residue_range=(residues[a].seq, residues[b].seq),
                    primitive=Primitive.LINES,
                    representation=RepresentationMode.TRACE.value,
                )
            )
        return chunks

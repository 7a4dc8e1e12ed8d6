#!/usr/bin/env python3
# src/ribbonkit/services/secondary_structure.py

"""
Secondary structure assignment for protein chains.

Labels come from three passes: HELIX/SHEET header records (authoritative),
geometric scoring of a sliding CA window for the remaining residues, and a
smoothing pass over the whole label sequence. The smoothing functions are
pure and work on tuples of labels.
"""

import logging
import math
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from Bio.PDB.vectors import Vector, calc_angle, calc_dihedral

from ..config import AnalyzerSettings
from ..domain.models.chain import Chain, ChainType
from ..domain.models.residue import Residue
from ..domain.models.secondary_structure import (
    AssignmentSource,
    ChainSummary,
    SecondaryStructure,
    SecondaryStructureAssignment,
)
from ..domain.models.structure import HelixRecord, SheetRecord, Structure

logger = logging.getLogger(__name__)

Labels = Tuple[SecondaryStructure, ...]

# Helix geometry
HELIX_CA_DISTANCE = 3.8
HELIX_DISTANCE_TOLERANCE = 0.2
HELIX_TURN_ANGLE = 100.0
HELIX_TURN_TOLERANCE = 30.0
TORSION_TOLERANCE = 30.0

# Sheet geometry
SHEET_MIN_DISTANCE = 3.3
SHEET_DISTANCE_RANGE = 0.5
SHEET_MAX_TURN_ANGLE = 30.0

DISTANCE_VARIANCE_LIMIT = 0.5
VARIANCE_PENALTY = 0.8
MIN_CONFIDENCE = 0.1

# Cross products below this (in A^2) mark colinear CA quadruples
_COLINEAR_EPSILON = 1e-3


def apply_header_records(
    residues: Iterable[Residue],
    helices: Sequence[HelixRecord],
    sheets: Sequence[SheetRecord],
) -> int:
    """
    Label residues covered by HELIX and SHEET records.

    A residue matches a record when its chain equals the record's initial
    chain and its sequence number lies in [init_seq, end_seq]. Sheets are
    applied after helices, so a residue named by both ends up as sheet.

    Returns:
        Number of residue labels written
    """
    by_chain: Dict[str, List[Residue]] = defaultdict(list)
    for residue in residues:
        by_chain[residue.chain_id].append(residue)

    spans = [(SecondaryStructure.HELIX, h.init_chain_id, h.init_seq, h.end_seq) for h in helices]
    spans += [(SecondaryStructure.SHEET, s.init_chain_id, s.init_seq, s.end_seq) for s in sheets]

    assigned = 0
    for label, chain_id, start, end in spans:
        for residue in by_chain.get(chain_id, ()):
            if start <= residue.seq <= end:
                residue.secondary_structure = label
                residue.ss_confidence = 1.0
                residue.ss_source = AssignmentSource.HEADER
                assigned += 1
    return assigned


def label_runs(labels: Sequence[SecondaryStructure]) -> List[Tuple[SecondaryStructure, int, int]]:
    """Maximal runs of equal labels as (label, start, end) with end inclusive."""
    runs = []
    start = 0
    for i in range(1, len(labels) + 1):
        if i == len(labels) or labels[i] is not labels[start]:
            runs.append((labels[start], start, i - 1))
            start = i
    return runs


def enforce_minimum_length(
    labels: Sequence[SecondaryStructure], label: SecondaryStructure, min_length: int
) -> Labels:
    """Revert runs of ``label`` shorter than ``min_length`` to coil."""
    result = list(labels)
    for run_label, start, end in label_runs(labels):
        if run_label is label and end - start + 1 < min_length:
            result[start : end + 1] = [SecondaryStructure.COIL] * (end - start + 1)
    return tuple(result)


def fill_short_gaps(labels: Sequence[SecondaryStructure], max_gap: int = 2) -> Labels:
    """
    Absorb short coil gaps into the structure around them.

    A maximal coil run of length 1..max_gap whose neighbours on both sides
    carry the same structured label takes that label.
    """
    result = list(labels)
    runs = label_runs(labels)
    for k in range(1, len(runs) - 1):
        run_label, start, end = runs[k]
        if run_label is not SecondaryStructure.COIL or end - start + 1 > max_gap:
            continue
        before, after = runs[k - 1][0], runs[k + 1][0]
        if before is after and before.is_structured:
            result[start : end + 1] = [before] * (end - start + 1)
    return tuple(result)


def smooth_labels(
    labels: Sequence[SecondaryStructure], settings: Optional[AnalyzerSettings] = None
) -> Labels:
    """Minimum-length filtering for helices and sheets, then gap filling."""
    settings = settings or AnalyzerSettings()
    smoothed = enforce_minimum_length(labels, SecondaryStructure.HELIX, settings.helix_min_length)
    smoothed = enforce_minimum_length(smoothed, SecondaryStructure.SHEET, settings.sheet_min_length)
    return fill_short_gaps(smoothed, settings.max_gap_length)


def _turn_angles(vectors: List[Vector], distances: np.ndarray) -> List[float]:
    """Angles in degrees between consecutive CA-CA bond vectors."""
    angles = []
    for i in range(1, len(vectors) - 1):
        if distances[i - 1] < 1e-6 or distances[i] < 1e-6:
            continue
        bond_angle = math.degrees(calc_angle(vectors[i - 1], vectors[i], vectors[i + 1]))
        angles.append(180.0 - bond_angle)
    return angles


def _torsions(coords: np.ndarray) -> List[float]:
    """CA pseudo-torsions in degrees, skipping colinear quadruples."""
    torsions = []
    for i in range(len(coords) - 3):
        p0, p1, p2, p3 = coords[i : i + 4]
        b1, b2, b3 = p1 - p0, p2 - p1, p3 - p2
        if (
            np.linalg.norm(np.cross(b1, b2)) < _COLINEAR_EPSILON
            or np.linalg.norm(np.cross(b2, b3)) < _COLINEAR_EPSILON
        ):
            continue
        angle = calc_dihedral(Vector(*p0), Vector(*p1), Vector(*p2), Vector(*p3))
        torsions.append(math.degrees(angle))
    return torsions


def helix_score(distances: np.ndarray, turn_angles: List[float], torsions: List[float]) -> float:
    """Mean of distance proximity, turn regularity and torsion consistency terms."""
    terms = []

    proximity = [
        1.0 - abs(d - HELIX_CA_DISTANCE) / HELIX_DISTANCE_TOLERANCE
        if abs(d - HELIX_CA_DISTANCE) <= HELIX_DISTANCE_TOLERANCE
        else 0.0
        for d in distances
    ]
    terms.append(float(np.mean(proximity)) if proximity else 0.0)

    low = HELIX_TURN_ANGLE - HELIX_TURN_TOLERANCE
    high = HELIX_TURN_ANGLE + HELIX_TURN_TOLERANCE
    if turn_angles and all(low <= a <= high for a in turn_angles):
        regularity = np.mean(
            [1.0 - abs(a - HELIX_TURN_ANGLE) / HELIX_TURN_TOLERANCE for a in turn_angles]
        )
        terms.append(float(regularity))
    else:
        terms.append(0.0)

    if len(torsions) >= 2:
        mean_torsion = np.mean(torsions)
        consistent = sum(1 for t in torsions if abs(t - mean_torsion) < TORSION_TOLERANCE)
        terms.append(consistent / len(torsions))

    return float(np.mean(terms))


def sheet_score(distances: np.ndarray, turn_angles: List[float]) -> float:
    """Mean of extension and straightness terms."""
    terms = []
    average = float(np.mean(distances)) if len(distances) else 0.0
    if average >= SHEET_MIN_DISTANCE:
        terms.append(min(1.0, (average - SHEET_MIN_DISTANCE) / SHEET_DISTANCE_RANGE))
    else:
        terms.append(0.0)

    if turn_angles:
        straight = sum(
            1
            for a in turn_angles
            if a < SHEET_MAX_TURN_ANGLE or a > 180.0 - SHEET_MAX_TURN_ANGLE
        )
        terms.append(straight / len(turn_angles))

    return float(np.mean(terms))


class SecondaryStructureAnalyzer:
    """Assigns helix/sheet/coil labels to the residues of protein chains."""

    def __init__(self, settings: Optional[AnalyzerSettings] = None):
        self.settings = settings or AnalyzerSettings()
        self.settings.validate()

    def score_window(self, coords: np.ndarray) -> SecondaryStructureAssignment:
        """
        Classify the residue at the center of a CA window.

        Args:
            coords: (k, 3) CA positions of the window, k >= min_ca_atoms

        Returns:
            Assignment with the label, confidence and both raw scores
        """
        coords = np.asarray(coords, dtype=np.float64)
        if len(coords) < self.settings.min_ca_atoms:
            return SecondaryStructureAssignment(SecondaryStructure.COIL, MIN_CONFIDENCE)

        distances = np.linalg.norm(np.diff(coords, axis=0), axis=1)
        vectors = [Vector(*c) for c in coords]
        angles = _turn_angles(vectors, distances)
        torsions = _torsions(coords)

        helix = helix_score(distances, angles, torsions)
        sheet = sheet_score(distances, angles)

        confidence = 1.0
        if len(coords) < self.settings.window_size:
            confidence *= len(coords) / self.settings.window_size
        if np.var(distances) > DISTANCE_VARIANCE_LIMIT:
            confidence *= VARIANCE_PENALTY
        confidence = max(MIN_CONFIDENCE, confidence)

        label = SecondaryStructure.COIL
        if confidence > self.settings.min_confidence:
            if helix > sheet and helix > self.settings.min_score:
                label = SecondaryStructure.HELIX
            elif sheet > helix and sheet > self.settings.min_score:
                label = SecondaryStructure.SHEET

        return SecondaryStructureAssignment(label, confidence, helix, sheet)

    def _geometric_pass(self, residues: List[Residue]) -> None:
        if len(residues) < self.settings.window_size:
            for residue in residues:
                if residue.ss_source is not AssignmentSource.HEADER:
                    residue.secondary_structure = SecondaryStructure.COIL
                    residue.ss_confidence = MIN_CONFIDENCE
                    residue.ss_source = AssignmentSource.GEOMETRY
            return

        coords = np.array([r.ca.coordinates for r in residues], dtype=np.float64)
        half = self.settings.window_size // 2
        for i, residue in enumerate(residues):
            if residue.ss_source is AssignmentSource.HEADER:
                continue
            window = coords[max(0, i - half) : min(len(residues), i + half + 1)]
            assignment = self.score_window(window)
            residue.secondary_structure = assignment.label
            residue.ss_confidence = assignment.confidence
            residue.ss_source = AssignmentSource.GEOMETRY

    def analyze_chain(self, chain: Chain) -> ChainSummary:
        """
        Run the geometric and smoothing passes over one chain in place.

        Header labels must already be applied. Only protein residues with a
        CA atom take part; other chains are summarized unchanged.
        """
        summary = ChainSummary(chain.id)
        if chain.type is not ChainType.PROTEIN:
            return summary

        residues = chain.backbone_residues()
        if self.settings.use_geometry:
            self._geometric_pass(residues)

        smoothed = smooth_labels([r.secondary_structure for r in residues], self.settings)
        for residue, label in zip(residues, smoothed):
            residue.secondary_structure = label

        for residue in residues:
            ss = residue.secondary_structure
            summary.counts[ss] = summary.counts.get(ss, 0) + 1

        logger.debug(
            f"Chain {chain.id}: "
            + ", ".join(f"{ss.value}={summary.counts.get(ss, 0)}" for ss in SecondaryStructure)
        )
        return summary

    def analyze(self, structure: Structure) -> Dict[str, ChainSummary]:
        """Analyze every protein chain of a structure."""
        summaries = {}
        for chain in structure.chains:
            if chain.type is ChainType.PROTEIN:
                summaries[chain.id] = self.analyze_chain(chain)
        return summaries

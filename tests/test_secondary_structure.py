#!/usr/bin/env python3
# tests/test_secondary_structure.py

import random

import numpy as np
import pytest

from conftest import ca_chain_lines, helix_coordinates, sheet_record, strand_coordinates, to_pdb
from ribbonkit.config import AnalyzerSettings
from ribbonkit.domain.errors import ConfigurationError
from ribbonkit.domain.models import AssignmentSource, SecondaryStructure
from ribbonkit.services.secondary_structure import (
    MIN_CONFIDENCE,
    SecondaryStructureAnalyzer,
    fill_short_gaps,
    label_runs,
    smooth_labels,
)

H = SecondaryStructure.HELIX
E = SecondaryStructure.SHEET
C = SecondaryStructure.COIL


def run_lengths(labels, label):
    return [end - start + 1 for run, start, end in label_runs(labels) if run is label]


class TestLabels:
    @pytest.mark.parametrize(
        "alias, expected",
        [("H", H), ("helix", H), ("strand", E), ("e", E), ("Sheet", E), ("turn", C), ("loop", C)],
    )
    def test_aliases(self, alias, expected):
        assert SecondaryStructure.from_label(alias) is expected

    def test_unknown_alias(self):
        with pytest.raises(ValueError):
            SecondaryStructure.from_label("pi-helix")

    def test_label_runs(self):
        assert label_runs([H, H, C, E, E, E]) == [(H, 0, 1), (C, 2, 2), (E, 3, 5)]
        assert label_runs([]) == []


class TestSmoothing:
    def test_short_helix_reverts_to_coil(self):
        assert smooth_labels([H, H, H, C]) == (C, C, C, C)

    def test_short_sheet_reverts_to_coil(self):
        assert smooth_labels([E, E, C, C, C]) == (C, C, C, C, C)

    def test_gap_between_equal_structures_is_filled(self):
        labels = [H] * 4 + [C, C] + [H] * 4
        assert smooth_labels(labels) == (H,) * 10

    def test_gap_between_different_structures_is_kept(self):
        labels = (E, E, E, C, H, H, H, H)
        assert smooth_labels(labels) == labels

    def test_long_gap_is_kept(self):
        labels = (H,) * 4 + (C,) * 3 + (H,) * 4
        assert smooth_labels(labels) == labels

    def test_terminal_coil_is_kept(self):
        labels = (C, H, H, H, H, C)
        assert smooth_labels(labels) == labels

    def test_gap_fill_respects_max_gap(self):
        labels = (E, E, E, C, E, E, E)
        assert fill_short_gaps(labels, max_gap=0) == labels
        assert fill_short_gaps(labels, max_gap=1) == (E,) * 7

    def test_random_sequences_meet_minimum_lengths(self):
        rng = random.Random(42)
        settings = AnalyzerSettings()
        for _ in range(200):
            labels = [rng.choice((H, E, C)) for _ in range(rng.randint(0, 40))]
            smoothed = smooth_labels(labels, settings)

            assert len(smoothed) == len(labels)
            assert all(n >= settings.helix_min_length for n in run_lengths(smoothed, H))
            assert all(n >= settings.sheet_min_length for n in run_lengths(smoothed, E))
            assert smooth_labels(smoothed, settings) == smoothed


class TestAnalyzer:
    def test_invalid_settings_rejected(self):
        with pytest.raises(ConfigurationError):
            SecondaryStructureAnalyzer(AnalyzerSettings(window_size=2))

    def test_score_window_too_few_atoms(self):
        analyzer = SecondaryStructureAnalyzer()
        assignment = analyzer.score_window(np.zeros((2, 3)))
        assert assignment.label is C
        assert assignment.confidence == MIN_CONFIDENCE

    def test_ideal_helix_window(self):
        assignment = SecondaryStructureAnalyzer().score_window(np.array(helix_coordinates(5)))
        assert assignment.label is H
        assert assignment.helix_score > assignment.sheet_score
        assert assignment.confidence == pytest.approx(1.0)

    def test_straight_line_scores_as_sheet(self):
        assignment = SecondaryStructureAnalyzer().score_window(np.array(strand_coordinates(5)))
        assert assignment.sheet_score == pytest.approx(1.0)
        assert assignment.helix_score == pytest.approx(0.5)
        assert assignment.label is E

    def test_uneven_spacing_lowers_confidence(self):
        coords = np.array([[0, 0, 0], [3.8, 0, 0], [5.0, 0, 0], [8.8, 0, 0], [10.0, 0, 0]], float)
        assignment = SecondaryStructureAnalyzer().score_window(coords)
        assert assignment.confidence == pytest.approx(0.8)

    def test_unannotated_helix_is_detected(self, parser, unannotated_helix_pdb):
        chain = parser.parse(unannotated_helix_pdb).chain("A")
        summary = SecondaryStructureAnalyzer().analyze_chain(chain)

        assert all(r.secondary_structure is H for r in chain.residues)
        assert all(r.ss_source is AssignmentSource.GEOMETRY for r in chain.residues)
        assert summary.counts[H] == 12
        assert summary.percentages[H] == pytest.approx(100.0)

    def test_straight_strand_is_never_helix(self, parser, strand_pdb):
        chain = parser.parse(strand_pdb).chain("A")
        SecondaryStructureAnalyzer().analyze_chain(chain)
        labels = [r.secondary_structure for r in chain.residues]
        assert H not in labels
        assert labels == [E] * 5

    def test_header_labels_are_kept(self, parser):
        text = to_pdb(
            [sheet_record("A", 1, 3)],
            ca_chain_lines(helix_coordinates(12)),
        )
        chain = parser.parse(text).chain("A")
        SecondaryStructureAnalyzer().analyze_chain(chain)

        for residue in chain.residues[:3]:
            assert residue.secondary_structure is E
            assert residue.ss_source is AssignmentSource.HEADER
            assert residue.ss_confidence == 1.0

    def test_geometry_pass_can_be_disabled(self, parser, unannotated_helix_pdb):
        chain = parser.parse(unannotated_helix_pdb).chain("A")
        SecondaryStructureAnalyzer(AnalyzerSettings(use_geometry=False)).analyze_chain(chain)
        assert all(r.secondary_structure is C for r in chain.residues)
        assert all(r.ss_source is AssignmentSource.NONE for r in chain.residues)

    def test_short_chain_is_low_confidence_coil(self, parser):
        chain = parser.parse(to_pdb(ca_chain_lines(helix_coordinates(4)))).chain("A")
        SecondaryStructureAnalyzer().analyze_chain(chain)
        for residue in chain.residues:
            assert residue.secondary_structure is C
            assert residue.ss_confidence == pytest.approx(MIN_CONFIDENCE)
            assert residue.ss_source is AssignmentSource.GEOMETRY

    def test_analyze_skips_non_protein_chains(self, parser, mixed_pdb):
        structure = parser.parse(mixed_pdb)
        summaries = SecondaryStructureAnalyzer().analyze(structure)
        assert list(summaries) == ["A"]
        data = summaries["A"].to_dict()
        assert data["chainId"] == "A"
        assert data["total"] == 13
        assert sum(data["counts"].values()) == 13

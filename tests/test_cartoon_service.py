#!/usr/bin/env python3
# tests/test_cartoon_service.py

import json

import pytest

from conftest import atom_line, ca_chain_lines, helix_coordinates, ring_ligand_lines, strand_coordinates, to_pdb
from ribbonkit.config import PipelineSettings
from ribbonkit.domain.models import SecondaryStructure
from ribbonkit.services.cartoon_service import CartoonService


@pytest.fixture
def two_chain_pdb():
    """Chain A helix, chain B strand, chain C with a single residue."""
    return to_pdb(
        ca_chain_lines(helix_coordinates(12), chain="A"),
        ca_chain_lines(strand_coordinates(6, (0.0, 20.0, 0.0)), chain="B", first_serial=100),
        ca_chain_lines([(40.0, 40.0, 40.0)], chain="C", first_serial=200),
        ring_ligand_lines(chain="A"),
    )


@pytest.fixture
def service():
    return CartoonService()


def test_build_from_text(service, helix_pdb):
    result = service.build(helix_pdb)

    assert len(result.chunks) == 1
    assert result.chunks[0].secondary_structure is SecondaryStructure.HELIX
    assert result.summaries["A"].counts[SecondaryStructure.HELIX] == 10
    assert result.failures == []
    assert not result.cancelled
    assert result.vertex_count == 201 * 12
    assert result.triangle_count == 200 * 12 * 2


def test_chain_failures_do_not_stop_other_chains(service, two_chain_pdb):
    result = service.build(two_chain_pdb)

    assert {c.chain_id for c in result.chunks} == {"A", "B"}
    assert len(result.failures) == 1
    failure = result.failures[0]
    assert failure.chain_id == "C"
    assert failure.error_type == "InsufficientBackboneError"


def test_geometric_labels(service, two_chain_pdb):
    result = service.build(two_chain_pdb)
    labels = {c.chain_id: c.secondary_structure for c in result.chunks}
    assert labels == {"A": SecondaryStructure.HELIX, "B": SecondaryStructure.SHEET}


def test_labels(service, two_chain_pdb):
    result = service.build(two_chain_pdb)
    texts = [label.text for label in result.labels]
    assert texts == ["Chain A", "Chain B", "Chain C", "LIG A900"]
    ligand_label = result.labels[-1]
    assert ligand_label.kind == "ligand"
    assert ligand_label.position == pytest.approx((20.0, 20.0, 20.0), abs=1e-3)


def test_chain_filter(service, two_chain_pdb):
    result = service.build(two_chain_pdb, chain_ids=["B", "Z"])
    assert {c.chain_id for c in result.chunks} == {"B"}
    assert list(result.summaries) == ["B"]


def test_cancellation_keeps_finished_chains(service, two_chain_pdb):
    calls = []

    def should_cancel():
        calls.append(1)
        return len(calls) > 1

    result = service.build(two_chain_pdb, should_cancel=should_cancel)
    assert result.cancelled
    assert {c.chain_id for c in result.chunks} == {"A"}


def test_parallel_matches_serial(service, two_chain_pdb):
    serial = service.build(two_chain_pdb)
    parallel = CartoonService().build(two_chain_pdb, max_workers=3)

    assert [c.chain_id for c in parallel.chunks] == [c.chain_id for c in serial.chunks]
    assert [c.vertex_count for c in parallel.chunks] == [c.vertex_count for c in serial.chunks]
    assert [f.chain_id for f in parallel.failures] == ["C"]


class RecordingService(CartoonService):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.processed = []

    def process_chain(self, chain, chain_index):
        outcome = super().process_chain(chain, chain_index)
        self.processed.append(chain.id)
        return outcome


def test_parallel_cancellation_keeps_every_processed_chain(two_chain_pdb):
    service = RecordingService()
    calls = []

    def should_cancel():
        calls.append(1)
        return len(calls) > 1

    result = service.build(two_chain_pdb, should_cancel=should_cancel, max_workers=2)
    assert result.cancelled

    reported = set(result.summaries) | {f.chain_id for f in result.failures}
    assert "A" in reported
    assert reported == set(service.processed)
    assert {label.text for label in result.labels if label.kind == "chain"} <= {
        f"Chain {chain_id}" for chain_id in service.processed
    }


def test_non_polymer_chains_are_skipped(service):
    lines = [
        atom_line(1, "O", "HOH", "W", 1, 0.0, 0.0, 0.0, element="O", record="HETATM"),
        atom_line(2, "O", "HOH", "W", 2, 3.0, 0.0, 0.0, element="O", record="HETATM"),
    ]
    result = service.build(to_pdb(lines))
    assert result.chunks == []
    assert result.failures == []


def test_payload_is_json_serializable(service, ligand_pdb):
    payload = service.build(ligand_pdb).to_payload()
    text = json.dumps(payload)

    data = json.loads(text)
    assert set(data) == {
        "header", "statistics", "summaries", "chunks", "ligands",
        "labels", "failures", "parseErrors", "cancelled",
    }
    chunk = data["chunks"][0]
    assert chunk["metadata"]["secondaryStructure"] == "helix"
    assert chunk["metadata"]["residueRange"] == [1, 10]
    assert len(chunk["positions"]) == len(chunk["normals"])
    assert len(chunk["colors"]) == len(chunk["positions"]) // 3 * 4
    assert data["ligands"][0]["residueName"] == "LIG"
    assert len(data["ligands"][0]["bonds"]) == 6


def test_parse_errors_reach_payload(service):
    lines = ca_chain_lines(helix_coordinates(6))
    lines[3] = lines[3][:30] + "     ???" + lines[3][38:]
    payload = service.build(to_pdb(lines)).to_payload()
    assert len(payload["parseErrors"]) == 1


def test_settings_are_validated():
    settings = PipelineSettings()
    settings.ribbon.samples_per_residue = 0
    with pytest.raises(ValueError):
        CartoonService(settings)

#!/usr/bin/env python3
# tests/conftest.py

"""
Shared fixtures: PDB text synthesized in memory.

Geometry follows textbook values: an ideal alpha helix has CA atoms on a
2.3 A radius with 1.5 A rise and 100 degrees of rotation per residue; an
idealized strand is a straight line with 3.8 A CA spacing.
"""

import math
from typing import Iterable, List, Tuple

import pytest

from ribbonkit.services.structure_parser import PDBStructureParser


def atom_line(
    serial: int,
    name: str,
    res_name: str,
    chain: str,
    seq: int,
    x: float,
    y: float,
    z: float,
    element: str = "C",
    record: str = "ATOM",
    alt_loc: str = " ",
    icode: str = " ",
    occupancy: float = 1.0,
    temp_factor: float = 20.0,
) -> str:
    """One fixed-column ATOM/HETATM record.

    Names shorter than four characters are placed from column 14, the
    convention for one-letter elements; four-character names fill 13-16.
    """
    name_field = name if len(name) == 4 else f" {name:<3}"
    return (
        f"{record:<6}{serial:>5} {name_field}{alt_loc:1}{res_name:>3} {chain:1}{seq:>4}{icode:1}   "
        f"{x:>8.3f}{y:>8.3f}{z:>8.3f}{occupancy:>6.2f}{temp_factor:>6.2f}          {element:>2}  "
    )


def helix_record(chain: str, start: int, end: int, serial: int = 1) -> str:
    return (
        f"HELIX  {serial:>3} {serial:>3} ALA {chain} {start:>4}  ALA {chain} {end:>4} {1:>2}"
    )


def sheet_record(chain: str, start: int, end: int, strand: int = 1) -> str:
    return (
        f"SHEET  {strand:>3} {'S1':>3}{1:>2} ALA {chain}{start:>4}  ALA {chain}{end:>4} {0:>2}"
    )


def helix_coordinates(count: int, start: int = 0) -> List[Tuple[float, float, float]]:
    return [
        (
            2.3 * math.cos(math.radians(100.0 * k)),
            2.3 * math.sin(math.radians(100.0 * k)),
            1.5 * k,
        )
        for k in range(start, start + count)
    ]


def strand_coordinates(
    count: int, origin: Tuple[float, float, float] = (0.0, 0.0, 0.0)
) -> List[Tuple[float, float, float]]:
    return [(origin[0] + 3.8 * k, origin[1], origin[2]) for k in range(count)]


def ca_chain_lines(
    coords: Iterable[Tuple[float, float, float]],
    chain: str = "A",
    first_seq: int = 1,
    first_serial: int = 1,
    res_name: str = "ALA",
) -> List[str]:
    return [
        atom_line(first_serial + i, "CA", res_name, chain, first_seq + i, x, y, z)
        for i, (x, y, z) in enumerate(coords)
    ]


def ring_ligand_lines(
    chain: str = "A", seq: int = 900, center=(20.0, 20.0, 20.0), first_serial: int = 5000
) -> List[str]:
    """Six carbons on a 1.39 A hexagon: six ring bonds, one fragment."""
    lines = []
    for i in range(6):
        angle = math.radians(60.0 * i)
        x = center[0] + 1.39 * math.cos(angle)
        y = center[1] + 1.39 * math.sin(angle)
        lines.append(
            atom_line(first_serial + i, f"C{i + 1}", "LIG", chain, seq, x, y, center[2], record="HETATM")
        )
    return lines


def to_pdb(*blocks: Iterable[str]) -> str:
    lines = []
    for block in blocks:
        lines.extend(block)
    lines.append("END")
    return "\n".join(lines) + "\n"


@pytest.fixture
def parser():
    return PDBStructureParser()


@pytest.fixture
def helix_pdb():
    """Ten-residue ideal helix with a matching HELIX record."""
    return to_pdb(
        [f"HEADER    {'DE NOVO PROTEIN':<40}{'18-OCT-26':<9}   1ABC"],
        [helix_record("A", 1, 10)],
        ca_chain_lines(helix_coordinates(10)),
    )


@pytest.fixture
def unannotated_helix_pdb():
    """Twelve-residue ideal helix without header records."""
    return to_pdb(ca_chain_lines(helix_coordinates(12)))


@pytest.fixture
def strand_pdb():
    """Five colinear CA atoms 3.8 A apart, no header records."""
    return to_pdb(ca_chain_lines(strand_coordinates(5)))


@pytest.fixture
def mixed_pdb():
    """Helix 1-6 and strand 9-13 from header records, unannotated loop 7-8."""
    helix = helix_coordinates(6)
    last = helix[-1]
    loop = [(last[0] + 3.0, last[1] + 2.0, last[2] + 1.5), (last[0] + 5.5, last[1] + 4.0, last[2] + 2.0)]
    strand_origin = (loop[-1][0] + 3.8, loop[-1][1], loop[-1][2])
    coords = helix + loop + strand_coordinates(5, strand_origin)
    return to_pdb(
        [helix_record("A", 1, 6), sheet_record("A", 9, 13)],
        ca_chain_lines(coords),
    )


@pytest.fixture
def ligand_pdb():
    """Helix chain A, one ring ligand and a water molecule."""
    return to_pdb(
        [helix_record("A", 1, 10)],
        ca_chain_lines(helix_coordinates(10)),
        ring_ligand_lines(),
        [atom_line(6000, "O", "HOH", "A", 1001, 30.0, 30.0, 30.0, element="O", record="HETATM")],
    )

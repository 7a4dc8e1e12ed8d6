#!/usr/bin/env python3
# tests/test_bond_inference.py

import numpy as np
import pytest

from ribbonkit.domain.errors import UnknownElementWarning
from ribbonkit.domain.models import Atom
from ribbonkit.services.bond_inference import (
    _pairwise_bonds,
    _radii,
    _tree_bonds,
    covalent_radius,
    infer_bonds,
)


def make_atoms(coords, element="C"):
    return [
        Atom(
            serial=i + 1,
            name=f"{element}{i + 1}",
            residue_name="LIG",
            chain_id="A",
            residue_seq=1,
            x=float(x),
            y=float(y),
            z=float(z),
            element=element,
            is_hetatm=True,
        )
        for i, (x, y, z) in enumerate(coords)
    ]


def test_covalent_radius_lookup():
    assert covalent_radius("C") == pytest.approx(0.76)
    assert covalent_radius("fe") == pytest.approx(1.32)


def test_unknown_element_warns_and_uses_carbon():
    with pytest.warns(UnknownElementWarning):
        assert covalent_radius("XX") == pytest.approx(0.76)


def test_single_atom_has_no_bonds():
    assert infer_bonds(make_atoms([(0.0, 0.0, 0.0)])) == []


def test_bond_thresholds():
    # 1.5 A is a C-C bond; 0.3 A is a clash; 2.5 A is beyond 1.3 * (0.76 + 0.76)
    atoms = make_atoms([(0.0, 0.0, 0.0), (1.5, 0.0, 0.0), (1.5, 0.3, 0.0), (4.0, 0.0, 0.0)])
    bonds = infer_bonds(atoms)
    pairs = [(b.atom1_index, b.atom2_index) for b in bonds]
    assert pairs == [(0, 1), (0, 2)]
    assert bonds[0].distance == pytest.approx(1.5)


def test_tree_matches_pairwise_on_large_groups():
    rng = np.random.default_rng(7)
    coords = rng.uniform(0.0, 14.0, size=(300, 3))
    atoms = make_atoms(coords)
    radii = _radii(atoms)

    expected = [(b.atom1_index, b.atom2_index) for b in _pairwise_bonds(coords, radii)]
    tree = [(b.atom1_index, b.atom2_index) for b in _tree_bonds(coords, radii)]
    assert expected
    assert tree == expected

    inferred = [(b.atom1_index, b.atom2_index) for b in infer_bonds(atoms)]
    assert inferred == expected


def test_bond_indices_are_ordered():
    rng = np.random.default_rng(3)
    atoms = make_atoms(rng.uniform(0.0, 5.0, size=(40, 3)))
    bonds = infer_bonds(atoms)
    assert all(b.atom1_index < b.atom2_index for b in bonds)
    keys = [(b.atom1_index, b.atom2_index) for b in bonds]
    assert keys == sorted(keys)


def test_tree_finds_nothing_between_distant_atoms():
    coords = np.arange(300, dtype=np.float64)[:, None] * np.array([10.0, 0.0, 0.0])
    atoms = make_atoms(coords)
    assert _tree_bonds(coords, _radii(atoms)) == []
    assert infer_bonds(atoms) == []

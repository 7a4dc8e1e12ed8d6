#!/usr/bin/env python3
# tests/test_repository.py

import gzip

import pytest

from ribbonkit.infrastructure.repositories import StructureRepository
from ribbonkit.infrastructure.repositories.structure_repository import structure_id


@pytest.fixture
def data_dir(tmp_path, helix_pdb, strand_pdb):
    (tmp_path / "1abc.pdb").write_text(helix_pdb)
    with gzip.open(tmp_path / "2def.pdb.gz", "wt") as f:
        f.write(strand_pdb)
    (tmp_path / "notes.txt").write_text("not a structure")
    (tmp_path / "nested.pdb").mkdir()
    return tmp_path


@pytest.mark.parametrize(
    "name, expected",
    [
        ("1abc.pdb", "1abc"),
        ("2def.pdb.gz", "2def"),
        ("pdb3xyz.ent", "pdb3xyz"),
        ("4ghi.CIF", "4ghi"),
        ("readme.md", None),
    ],
)
def test_structure_id(name, expected):
    assert structure_id(name) == expected


def test_list(data_dir):
    repository = StructureRepository(data_dir)
    assert repository.list() == ["1abc", "2def"]
    assert [p.name for p in repository.paths()] == ["1abc.pdb", "2def.pdb.gz"]


def test_get(data_dir):
    repository = StructureRepository(data_dir)
    assert len(repository.get("1abc").atoms) == 10
    assert len(repository.get("2def").atoms) == 5
    assert repository.get("9zzz") is None


def test_structures_are_cached(data_dir):
    repository = StructureRepository(data_dir)
    first = repository.get("1abc")
    assert repository.get("1abc") is first
    assert repository.load(data_dir / "1abc.pdb") is first

    repository.clear_cache()
    assert repository.get("1abc") is not first


def test_missing_directory(tmp_path):
    repository = StructureRepository(tmp_path / "absent")
    assert repository.list() == []
    assert repository.data_dir == tmp_path / "absent"

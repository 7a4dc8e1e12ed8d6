#!/usr/bin/env python3
# src/ribbonkit/services/structure_parser.py

"""
Fixed-column PDB parsing into the ribbonkit structure model.

Only the first model is read. ATOM/HETATM, HELIX, SHEET and HEADER records
are recognized; everything else is ignored. Records with unparseable
coordinates or residue numbers are rejected and reported on
``Structure.parse_errors`` instead of aborting the parse.
"""

import gzip
import logging
import math
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..domain.constants import SINGLE_LETTER_ELEMENTS, TWO_LETTER_ELEMENTS
from ..domain.errors import MalformedRecordError
from ..domain.models.atom import Atom
from ..domain.models.chain import Chain
from ..domain.models.ligand import Ligand
from ..domain.models.residue import Residue
from ..domain.models.structure import Header, HelixRecord, SheetRecord, Structure
from .bond_inference import infer_bonds
from .secondary_structure import apply_header_records

logger = logging.getLogger(__name__)


def guess_element(raw_name: str, is_hetatm: bool = False) -> str:
    """
    Guess an element symbol from the 4-character atom name field.

    Two-letter symbols (metals, halogens) are only considered for HETATM
    records whose name starts in the first column of the field, since a
    right-shifted " CA " is an alpha carbon.

    Args:
        raw_name: Atom name columns 13-16, unstripped
        is_hetatm: Whether the record is a HETATM

    Returns:
        Upper-case element symbol, "C" when nothing matches
    """
    name = raw_name.upper()
    stripped = name.strip().lstrip("0123456789")
    if is_hetatm and name[:1].isalpha() and stripped[:2] in TWO_LETTER_ELEMENTS:
        return stripped[:2]
    for char in stripped:
        if char in SINGLE_LETTER_ELEMENTS:
            return char
        if char.isalpha():
            break
    logger.debug(f"Could not guess element for atom name {raw_name!r}; assuming carbon")
    return "C"


def _column(line: str, start: int, end: int) -> str:
    """Stripped slice for 1-indexed inclusive columns."""
    return line[start - 1 : end].strip()


def _optional_int(text: str, default: int = 0) -> int:
    try:
        return int(text)
    except ValueError:
        return default


class StructureBuilder:
    """Groups atoms into residues, chains and ligands.

    Shared by every front end so that residue grouping, chain typing and
    ligand detection follow the same rules regardless of the input format.
    """

    def group_residues(self, atoms: Sequence[Atom]) -> List[Residue]:
        """Residues keyed by (chain, seq, icode), sorted by that key."""
        residues: Dict[Tuple[str, int, str], Residue] = {}
        for atom in atoms:
            key = atom.residue_key
            residue = residues.get(key)
            if residue is None:
                residues[key] = Residue(
                    chain_id=atom.chain_id,
                    seq=atom.residue_seq,
                    insertion_code=atom.insertion_code,
                    name=atom.residue_name,
                    atoms=[atom],
                )
            else:
                residue.add_atom(atom)

        ordered = [residues[key] for key in sorted(residues)]
        for residue in ordered:
            residue.cache_backbone()
            residue.is_ligand = (
                residue.has_hetatm
                and not residue.is_water
                and not residue.is_protein
                and not residue.is_nucleic
            )
        return ordered

    def group_chains(self, residues: Sequence[Residue]) -> List[Chain]:
        """Non-ligand residues grouped by chain id, chains sorted by id."""
        chains: Dict[str, Chain] = {}
        for residue in residues:
            if residue.is_ligand:
                continue
            chain = chains.setdefault(residue.chain_id, Chain(residue.chain_id))
            chain.residues.append(residue)

        ordered = [chains[chain_id] for chain_id in sorted(chains)]
        for chain in ordered:
            chain.infer_type()
        return ordered

    @staticmethod
    def _primary_conformer(atoms: Sequence[Atom]) -> List[Atom]:
        """Atoms without an alternate location plus those of the first one seen."""
        alt_locs = [a.alt_loc for a in atoms if a.alt_loc]
        if not alt_locs:
            return list(atoms)
        keep = alt_locs[0]
        return [a for a in atoms if a.alt_loc in ("", keep)]

    def build_ligands(self, residues: Sequence[Residue]) -> List[Ligand]:
        ligands = []
        for residue in residues:
            if not residue.is_ligand:
                continue
            atoms = self._primary_conformer(residue.atoms)
            ligands.append(
                Ligand(
                    chain_id=residue.chain_id,
                    residue_name=residue.name,
                    residue_seq=residue.seq,
                    atoms=atoms,
                    bonds=infer_bonds(atoms),
                )
            )
        return ligands

    def build(
        self,
        atoms: Sequence[Atom],
        header: Optional[Header] = None,
        helices: Sequence[HelixRecord] = (),
        sheets: Sequence[SheetRecord] = (),
        parse_errors: Sequence[MalformedRecordError] = (),
    ) -> Structure:
        """
        Assemble a Structure and apply header secondary structure records.

        Args:
            atoms: Atoms of a single model
            header: HEADER record, if any
            helices: HELIX records
            sheets: SHEET records
            parse_errors: Rejected records to carry along

        Returns:
            Structure with residues, chains and ligands
        """
        residues = self.group_residues(atoms)
        chains = self.group_chains(residues)
        ligands = self.build_ligands(residues)

        polymer_residues = [r for chain in chains for r in chain.residues]
        apply_header_records(polymer_residues, helices, sheets)

        return Structure(
            atoms=list(atoms),
            residues=residues,
            chains=chains,
            ligands=ligands,
            header=header or Header(),
            helices=list(helices),
            sheets=list(sheets),
            parse_errors=list(parse_errors),
        )


class PDBStructureParser:
    """Parser for fixed-column PDB text."""

    def __init__(self, strict: bool = False, builder: Optional[StructureBuilder] = None):
        """
        Args:
            strict: Raise on the first malformed record instead of skipping it
            builder: Builder used to assemble the parsed atoms
        """
        self.strict = strict
        self.builder = builder or StructureBuilder()

    def _reject(
        self, errors: List[MalformedRecordError], error: MalformedRecordError
    ) -> None:
        if self.strict:
            raise error
        logger.warning(f"Skipping malformed record: {error}")
        errors.append(error)

    def parse_atom(self, line: str, line_number: Optional[int] = None) -> Atom:
        """
        Parse one ATOM or HETATM line.

        Raises:
            MalformedRecordError: If the residue number or a coordinate cannot be parsed
        """
        record = line[0:6].strip()
        is_hetatm = record == "HETATM"

        serial_text = _column(line, 7, 11)
        try:
            serial = int(serial_text)
        except ValueError:
            logger.warning(f"line {line_number}: unparseable atom serial {serial_text!r}; using -1")
            serial = -1

        seq_text = _column(line, 23, 26)
        try:
            residue_seq = int(seq_text)
        except ValueError:
            raise MalformedRecordError(
                f"invalid residue number {seq_text!r}", line_number, record, "resSeq"
            ) from None

        coordinates = []
        for axis, (start, end) in zip("xyz", ((31, 38), (39, 46), (47, 54))):
            text = _column(line, start, end)
            try:
                value = float(text)
            except ValueError:
                value = math.nan
            if not math.isfinite(value):
                raise MalformedRecordError(
                    f"invalid {axis} coordinate {text!r}", line_number, record, axis
                )
            coordinates.append(value)

        occupancy_text = _column(line, 55, 60)
        temp_text = _column(line, 61, 66)
        try:
            occupancy = float(occupancy_text) if occupancy_text else 1.0
        except ValueError:
            occupancy = 1.0
        try:
            temp_factor = float(temp_text) if temp_text else 0.0
        except ValueError:
            temp_factor = 0.0

        raw_name = line[12:16]
        element = _column(line, 77, 78).upper()
        if not element or not element.isalpha():
            element = guess_element(raw_name, is_hetatm)

        return Atom(
            serial=serial,
            name=raw_name.strip(),
            residue_name=_column(line, 18, 20),
            chain_id=_column(line, 22, 22),
            residue_seq=residue_seq,
            x=coordinates[0],
            y=coordinates[1],
            z=coordinates[2],
            alt_loc=_column(line, 17, 17),
            insertion_code=_column(line, 27, 27),
            occupancy=occupancy,
            temp_factor=temp_factor,
            element=element,
            charge=_column(line, 79, 80),
            is_hetatm=is_hetatm,
        )

    @staticmethod
    def parse_helix(line: str, line_number: Optional[int] = None) -> HelixRecord:
        try:
            init_seq = int(_column(line, 22, 25))
            end_seq = int(_column(line, 34, 37))
        except ValueError:
            raise MalformedRecordError(
                "invalid HELIX residue range", line_number, "HELIX", "seq"
            ) from None
        return HelixRecord(
            serial=_column(line, 8, 10),
            helix_class=_optional_int(_column(line, 39, 40), 1),
            init_chain_id=_column(line, 20, 20),
            init_seq=init_seq,
            init_icode=_column(line, 26, 26),
            end_chain_id=_column(line, 32, 32),
            end_seq=end_seq,
            end_icode=_column(line, 38, 38),
        )

    @staticmethod
    def parse_sheet(line: str, line_number: Optional[int] = None) -> SheetRecord:
        try:
            init_seq = int(_column(line, 23, 26))
            end_seq = int(_column(line, 34, 37))
        except ValueError:
            raise MalformedRecordError(
                "invalid SHEET residue range", line_number, "SHEET", "seq"
            ) from None
        return SheetRecord(
            strand=_optional_int(_column(line, 8, 10)),
            sheet_id=_column(line, 12, 14),
            num_strands=_optional_int(_column(line, 15, 16)),
            init_chain_id=_column(line, 22, 22),
            init_seq=init_seq,
            init_icode=_column(line, 27, 27),
            end_chain_id=_column(line, 33, 33),
            end_seq=end_seq,
            end_icode=_column(line, 38, 38),
            sense=_optional_int(_column(line, 39, 40)),
        )

    @staticmethod
    def parse_header(line: str) -> Header:
        return Header(
            classification=_column(line, 11, 50),
            deposition_date=_column(line, 51, 59),
            id_code=_column(line, 63, 66),
        )

    def parse(self, text: str) -> Structure:
        """
        Parse PDB text into a Structure.

        Args:
            text: Full file contents

        Returns:
            Structure built from the first model
        """
        atoms: List[Atom] = []
        helices: List[HelixRecord] = []
        sheets: List[SheetRecord] = []
        errors: List[MalformedRecordError] = []
        header: Optional[Header] = None
        first_model_done = False

        for line_number, line in enumerate(text.splitlines(), start=1):
            record = line[0:6].strip()

            if record in ("ATOM", "HETATM"):
                if first_model_done:
                    continue
                try:
                    atoms.append(self.parse_atom(line, line_number))
                except MalformedRecordError as e:
                    self._reject(errors, e)
            elif record == "HELIX":
                try:
                    helices.append(self.parse_helix(line, line_number))
                except MalformedRecordError as e:
                    self._reject(errors, e)
            elif record == "SHEET":
                try:
                    sheets.append(self.parse_sheet(line, line_number))
                except MalformedRecordError as e:
                    self._reject(errors, e)
            elif record == "HEADER":
                header = self.parse_header(line)
            elif record == "MODEL":
                if atoms:
                    first_model_done = True
            elif record in ("ENDMDL", "END"):
                if atoms:
                    first_model_done = True

        structure = self.builder.build(atoms, header, helices, sheets, errors)
        stats = structure.statistics()
        logger.info(
            f"Parsed {stats['total_atoms']} atoms, {stats['total_residues']} residues, "
            f"{stats['total_chains']} chains, {stats['ligands']} ligands"
            + (f" ({len(errors)} records rejected)" if errors else "")
        )
        return structure

    def parse_file(self, path: Union[str, Path]) -> Structure:
        """Parse a PDB file; ``.gz`` files are decompressed transparently."""
        path = Path(path)
        if path.suffix == ".gz":
            with gzip.open(path, "rt") as f:
                text = f.read()
        else:
            with open(path, "r") as f:
                text = f.read()
        return self.parse(text)

"""Adapter loading PDB and mmCIF files through Bio.PDB."""

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from Bio.PDB.MMCIF2Dict import MMCIF2Dict
from Bio.PDB.MMCIFParser import MMCIFParser
from Bio.PDB.PDBParser import PDBParser

from ...domain.errors import MalformedRecordError
from ...domain.models.atom import Atom
from ...domain.models.structure import Header, HelixRecord, SheetRecord, Structure
from ...services.structure_parser import PDBStructureParser, StructureBuilder, guess_element

logger = logging.getLogger(__name__)

MMCIF_SUFFIXES = (".cif", ".mmcif")


def _as_list(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def _blank(value: str) -> str:
    return "" if value in ("?", ".") else value


class BiopythonStructureAdapter:
    """Builds ribbonkit Structures from Bio.PDB parse results.

    Atoms of every alternate location are kept, as with the fixed-column
    parser. Secondary structure annotations come from HELIX/SHEET records for
    PDB files and from the _struct_conf and _struct_sheet_range categories
    for mmCIF files.
    """

    def __init__(self, builder: Optional[StructureBuilder] = None):
        self.builder = builder or StructureBuilder()

    def load(self, path: Union[str, Path]) -> Structure:
        """
        Load the first model of a PDB or mmCIF file.

        Args:
            path: Path to the structure file

        Returns:
            Structure with header annotations applied
        """
        path = Path(path)
        is_mmcif = path.suffix.lower() in MMCIF_SUFFIXES
        parser = MMCIFParser(QUIET=True) if is_mmcif else PDBParser(QUIET=True)
        bio_structure = parser.get_structure(path.stem, str(path))

        atoms = self.convert_atoms(bio_structure)
        if is_mmcif:
            header, helices, sheets = self.read_mmcif_annotations(path)
        else:
            header, helices, sheets = self.read_pdb_annotations(path, bio_structure.header)

        logger.info(f"Loaded {len(atoms)} atoms from {path.name} via Bio.PDB")
        return self.builder.build(atoms, header, helices, sheets)

    @staticmethod
    def convert_atoms(bio_structure) -> List[Atom]:
        """Atoms of the first model, alternate locations unpacked."""
        models = list(bio_structure)
        if not models:
            return []

        atoms = []
        for chain in models[0]:
            for residue in chain:
                hetero_flag, seq, icode = residue.id
                is_hetatm = hetero_flag.strip() != ""
                for atom in residue.get_unpacked_list():
                    x, y, z = (float(c) for c in atom.coord)
                    element = (atom.element or "").strip().upper()
                    if not element or element == "X":
                        element = guess_element(atom.get_fullname(), is_hetatm)
                    occupancy = atom.get_occupancy()
                    bfactor = atom.get_bfactor()
                    serial = atom.get_serial_number()
                    atoms.append(
                        Atom(
                            serial=serial if serial is not None else -1,
                            name=atom.get_name(),
                            residue_name=residue.get_resname().strip(),
                            chain_id=chain.id.strip(),
                            residue_seq=int(seq),
                            x=x,
                            y=y,
                            z=z,
                            alt_loc=atom.get_altloc().strip(),
                            insertion_code=icode.strip(),
                            occupancy=1.0 if occupancy is None else float(occupancy),
                            temp_factor=0.0 if bfactor is None else float(bfactor),
                            element=element,
                            is_hetatm=is_hetatm,
                        )
                    )
        return atoms

    @staticmethod
    def read_pdb_annotations(
        path: Path, bio_header: dict
    ) -> Tuple[Header, List[HelixRecord], List[SheetRecord]]:
        header = Header(
            classification=(bio_header.get("head") or "").upper(),
            deposition_date=bio_header.get("deposition_date") or "",
            id_code=(bio_header.get("idcode") or "").upper(),
        )
        helices, sheets = [], []
        with open(path, "r") as f:
            for line_number, line in enumerate(f, start=1):
                record = line[0:6].strip()
                try:
                    if record == "HELIX":
                        helices.append(PDBStructureParser.parse_helix(line, line_number))
                    elif record == "SHEET":
                        sheets.append(PDBStructureParser.parse_sheet(line, line_number))
                except MalformedRecordError as e:
                    logger.warning(f"Skipping malformed record: {e}")
        return header, helices, sheets

    @staticmethod
    def read_mmcif_annotations(path: Path) -> Tuple[Header, List[HelixRecord], List[SheetRecord]]:
        data = MMCIF2Dict(str(path))
        header = Header(
            classification=_blank((_as_list(data.get("_struct_keywords.pdbx_keywords")) or [""])[0]),
            deposition_date=_blank(
                (_as_list(data.get("_pdbx_database_status.recvd_initial_deposition_date")) or [""])[0]
            ),
            id_code=_blank((_as_list(data.get("_entry.id")) or [""])[0]),
        )

        helices = []
        conf_types = _as_list(data.get("_struct_conf.conf_type_id"))
        for i, conf_type in enumerate(conf_types):
            if not conf_type.upper().startswith("HELX"):
                continue
            try:
                helices.append(
                    HelixRecord(
                        serial=_as_list(data.get("_struct_conf.id"))[i],
                        helix_class=1,
                        init_chain_id=_as_list(data["_struct_conf.beg_auth_asym_id"])[i],
                        init_seq=int(_as_list(data["_struct_conf.beg_auth_seq_id"])[i]),
                        init_icode=_blank(
                            _as_list(data.get("_struct_conf.pdbx_beg_PDB_ins_code", ["?"] * len(conf_types)))[i]
                        ),
                        end_chain_id=_as_list(data["_struct_conf.end_auth_asym_id"])[i],
                        end_seq=int(_as_list(data["_struct_conf.end_auth_seq_id"])[i]),
                        end_icode=_blank(
                            _as_list(data.get("_struct_conf.pdbx_end_PDB_ins_code", ["?"] * len(conf_types)))[i]
                        ),
                    )
                )
            except (KeyError, IndexError, ValueError) as e:
                logger.warning(f"Skipping malformed _struct_conf row {i}: {e}")

        sheets = []
        sheet_ids = _as_list(data.get("_struct_sheet_range.sheet_id"))
        for i, sheet_id in enumerate(sheet_ids):
            strands = _as_list(data.get("_struct_sheet_range.id"))
            strand = strands[i] if i < len(strands) else ""
            try:
                sheets.append(
                    SheetRecord(
                        strand=int(strand) if strand.isdigit() else 0,
                        sheet_id=sheet_id,
                        num_strands=0,
                        init_chain_id=_as_list(data["_struct_sheet_range.beg_auth_asym_id"])[i],
                        init_seq=int(_as_list(data["_struct_sheet_range.beg_auth_seq_id"])[i]),
                        init_icode="",
                        end_chain_id=_as_list(data["_struct_sheet_range.end_auth_asym_id"])[i],
                        end_seq=int(_as_list(data["_struct_sheet_range.end_auth_seq_id"])[i]),
                        end_icode="",
                        sense=0,
                    )
                )
            except (KeyError, IndexError, ValueError) as e:
                logger.warning(f"Skipping malformed _struct_sheet_range row {i}: {e}")

        return header, helices, sheets

"""Residue name sets, element tables and color palettes."""

# Standard amino acids plus common modified residues seen in deposited files
PROTEIN_RESIDUES = frozenset(
    {
        "ALA", "ARG", "ASN", "ASP", "CYS", "GLN", "GLU", "GLY", "HIS", "ILE",
        "LEU", "LYS", "MET", "PHE", "PRO", "SER", "THR", "TRP", "TYR", "VAL",
        "MSE",  # Selenomethionine
        "SEP",  # Phosphoserine
        "TPO",  # Phosphothreonine
        "PTR",  # Phosphotyrosine
        "MLY",  # N-dimethyl-lysine
        "M3L",  # N-trimethyl-lysine
        "HYP",  # Hydroxyproline
        "CSO",  # S-hydroxycysteine
        "SEC",  # Selenocysteine
        "PCA",  # Pyroglutamic acid
    }
)

NUCLEIC_RESIDUES = frozenset(
    {
        "A", "G", "C", "T", "U", "I",
        "DA", "DG", "DC", "DT", "DU", "DI",
        "ADE", "GUA", "CYT", "THY", "URA",
    }
)

WATER_RESIDUES = frozenset({"HOH", "WAT", "DOD"})

# Backbone atoms cached on residues, keyed by attribute name
PROTEIN_BACKBONE_ATOMS = {"ca": "CA", "c": "C", "n": "N", "o": "O"}
NUCLEIC_BACKBONE_ATOMS = {"p": "P", "c5_prime": "C5'", "c3_prime": "C3'", "c1_prime": "C1'"}

# Covalent radii in Angstroms used for ligand bond inference
COVALENT_RADII = {
    "H": 0.31, "B": 0.84, "C": 0.76, "N": 0.71, "O": 0.66, "F": 0.57,
    "NA": 1.66, "MG": 1.41, "AL": 1.21, "SI": 1.11, "P": 1.07, "S": 1.05,
    "CL": 1.02, "K": 2.03, "CA": 1.76, "MN": 1.39, "FE": 1.32, "CO": 1.26,
    "NI": 1.24, "CU": 1.32, "ZN": 1.22, "SE": 1.20, "BR": 1.20, "I": 1.39,
}
DEFAULT_COVALENT_RADIUS = COVALENT_RADII["C"]

# Bond inference tolerances
BOND_TOLERANCE_FACTOR = 1.3
MIN_BOND_DISTANCE = 0.4

# Above this size ligand bonds are found with a k-d tree instead of a full
# distance matrix
MAX_PAIRWISE_LIGAND_ATOMS = 256

# Element symbols that may appear left-justified in the atom name field of
# HETATM records (ions, halogens, cofactor metals)
TWO_LETTER_ELEMENTS = frozenset(
    {"FE", "MG", "ZN", "CL", "BR", "CA", "NA", "MN", "CU", "CO", "NI", "SE", "CD", "HG"}
)
SINGLE_LETTER_ELEMENTS = frozenset({"H", "C", "N", "O", "S", "P", "F", "I", "K", "B"})

# RGB palettes
SECONDARY_STRUCTURE_COLORS = {
    "helix": (1.0, 0.0, 1.0),  # Magenta
    "sheet": (0.0, 1.0, 1.0),  # Cyan
    "coil": (1.0, 1.0, 0.0),  # Yellow
}

CHAIN_COLORS = [
    (0.8, 0.3, 0.3),  # Red
    (0.3, 0.8, 0.3),  # Green
    (0.3, 0.3, 0.8),  # Blue
    (0.8, 0.8, 0.3),  # Yellow
    (0.8, 0.3, 0.8),  # Magenta
    (0.3, 0.8, 0.8),  # Cyan
]

UNIFORM_COLOR = (0.7, 0.7, 0.7)

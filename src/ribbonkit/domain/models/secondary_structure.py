"""Secondary structure labels and assignment records."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict


class SecondaryStructure(Enum):
    """Closed set of backbone conformation classes."""

    HELIX = "helix"
    SHEET = "sheet"
    COIL = "coil"

    @classmethod
    def from_label(cls, label: str) -> "SecondaryStructure":
        """Parse a label or one of its common aliases.

        Raises:
            ValueError: If the label is not a known alias
        """
        key = label.strip().lower()
        try:
            return _ALIASES[key]
        except KeyError:
            raise ValueError(f"Unknown secondary structure label: {label!r}") from None

    @property
    def is_structured(self) -> bool:
        return self is not SecondaryStructure.COIL


_ALIASES = {
    "helix": SecondaryStructure.HELIX,
    "h": SecondaryStructure.HELIX,
    "sheet": SecondaryStructure.SHEET,
    "strand": SecondaryStructure.SHEET,
    "e": SecondaryStructure.SHEET,
    "coil": SecondaryStructure.COIL,
    "c": SecondaryStructure.COIL,
    "loop": SecondaryStructure.COIL,
    "l": SecondaryStructure.COIL,
    "turn": SecondaryStructure.COIL,
    "t": SecondaryStructure.COIL,
}


class AssignmentSource(Enum):
    """Which analyzer pass produced a residue's label."""

    NONE = "none"
    HEADER = "header"
    GEOMETRY = "geometry"


@dataclass(frozen=True)
class SecondaryStructureAssignment:
    """Label and confidence for one residue after a pass."""

    label: SecondaryStructure
    confidence: float
    helix_score: float = 0.0
    sheet_score: float = 0.0


@dataclass
class ChainSummary:
    """Per-chain label counts after analysis."""

    chain_id: str
    counts: Dict[SecondaryStructure, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def percentages(self) -> Dict[SecondaryStructure, float]:
        total = self.total
        return {
            ss: (100.0 * self.counts.get(ss, 0) / total if total else 0.0)
            for ss in SecondaryStructure
        }

    def to_dict(self) -> dict:
        percentages = self.percentages
        return {
            "chainId": self.chain_id,
            "total": self.total,
            "counts": {ss.value: self.counts.get(ss, 0) for ss in SecondaryStructure},
            "percentages": {ss.value: round(percentages[ss], 1) for ss in SecondaryStructure},
        }

#!/usr/bin/env python3
# src/ribbonkit/services/cartoon_service.py

"""
End-to-end cartoon generation for a whole structure.

Parses (when given text), assigns secondary structure and generates mesh
chunks chain by chain. Errors are scoped to the chain that raised them; the
result always carries everything that succeeded.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from ..config import PipelineSettings
from ..domain.errors import RibbonKitError
from ..domain.models.chain import Chain, ChainType
from ..domain.models.ligand import Ligand
from ..domain.models.mesh_chunk import MeshChunk
from ..domain.models.secondary_structure import ChainSummary
from ..domain.models.structure import Structure
from .ribbon_generator import RibbonGeometryGenerator
from .secondary_structure import SecondaryStructureAnalyzer
from .structure_parser import PDBStructureParser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SceneLabel:
    """Text anchored at a point, for the renderer to draw."""

    text: str
    position: Tuple[float, float, float]
    kind: str  # "chain" or "ligand"

    def to_dict(self) -> dict:
        return {"text": self.text, "position": list(self.position), "kind": self.kind}


@dataclass(frozen=True)
class ChainFailure:
    chain_id: str
    error_type: str
    message: str

    def to_dict(self) -> dict:
        return {"chainId": self.chain_id, "errorType": self.error_type, "message": self.message}


@dataclass
class CartoonResult:
    """Everything produced for one structure."""

    structure: Structure
    summaries: Dict[str, ChainSummary] = field(default_factory=dict)
    chunks: List[MeshChunk] = field(default_factory=list)
    labels: List[SceneLabel] = field(default_factory=list)
    failures: List[ChainFailure] = field(default_factory=list)
    cancelled: bool = False

    @property
    def ligands(self) -> List[Ligand]:
        return self.structure.ligands

    @property
    def vertex_count(self) -> int:
        return sum(chunk.vertex_count for chunk in self.chunks)

    @property
    def triangle_count(self) -> int:
        return sum(chunk.triangle_count for chunk in self.chunks)

    def to_payload(self) -> dict:
        """Renderer-agnostic dictionary of meshes, labels and metadata."""
        return {
            "header": asdict(self.structure.header),
            "statistics": self.structure.statistics(),
            "summaries": [summary.to_dict() for summary in self.summaries.values()],
            "chunks": [chunk.to_dict() for chunk in self.chunks],
            "ligands": [ligand.to_dict() for ligand in self.ligands],
            "labels": [label.to_dict() for label in self.labels],
            "failures": [failure.to_dict() for failure in self.failures],
            "parseErrors": [str(error) for error in self.structure.parse_errors],
            "cancelled": self.cancelled,
        }


ChainOutcome = Tuple[Optional[ChainSummary], List[MeshChunk], Optional[ChainFailure]]


class CartoonService:
    """Runs parse, analysis and mesh generation for a structure."""

    def __init__(
        self,
        settings: Optional[PipelineSettings] = None,
        parser: Optional[PDBStructureParser] = None,
    ):
        self.settings = settings or PipelineSettings()
        self.settings.validate()
        self.parser = parser or PDBStructureParser()
        self.analyzer = SecondaryStructureAnalyzer(self.settings.analyzer)
        self.generator = RibbonGeometryGenerator(self.settings.ribbon)

    def process_chain(self, chain: Chain, chain_index: int) -> ChainOutcome:
        """
        Analyze and mesh one chain.

        Returns:
            Tuple of (summary or None, chunks, failure or None)
        """
        try:
            summary = None
            if chain.type is ChainType.PROTEIN:
                summary = self.analyzer.analyze_chain(chain)
            chunks = self.generator.generate(chain, chain_index=chain_index, strict=True)
            return summary, chunks, None
        except RibbonKitError as e:
            logger.warning(f"Skipping chain {chain.id}: {e}")
            return None, [], ChainFailure(chain.id, type(e).__name__, str(e))

    @staticmethod
    def _labels(structure: Structure, chains: Sequence[Chain]) -> List[SceneLabel]:
        labels = []
        for chain in chains:
            residues = chain.backbone_residues()
            if residues:
                labels.append(
                    SceneLabel(f"Chain {chain.id}", residues[0].backbone_atom.coordinates, "chain")
                )
        for ligand in structure.ligands:
            if ligand.atoms:
                centroid = tuple(float(c) for c in ligand.centroid)
                text = f"{ligand.residue_name} {ligand.chain_id}{ligand.residue_seq}"
                labels.append(SceneLabel(text, centroid, "ligand"))
        return labels

    def build(
        self,
        source: Union[str, Structure],
        chain_ids: Optional[Sequence[str]] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
        max_workers: int = 1,
    ) -> CartoonResult:
        """
        Generate the cartoon for a structure.

        Args:
            source: PDB text or an already parsed Structure
            chain_ids: Restrict output to these chains; all chains by default
            should_cancel: Polled between chains; returning True stops early
            max_workers: Chains processed in parallel when greater than one

        Returns:
            CartoonResult with the chains finished before any cancellation
        """
        structure = self.parser.parse(source) if isinstance(source, str) else source
        result = CartoonResult(structure=structure)

        indexed = [
            (index, chain)
            for index, chain in enumerate(structure.chains)
            if chain.type is not ChainType.OTHER
            and (chain_ids is None or chain.id in chain_ids)
        ]
        if chain_ids is not None:
            missing = set(chain_ids) - {chain.id for chain in structure.chains}
            for chain_id in sorted(missing):
                logger.warning(f"Chain {chain_id} not found in structure")

        cancel = should_cancel or (lambda: False)
        outcomes: List[Tuple[Chain, ChainOutcome]] = []

        if max_workers > 1 and len(indexed) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = [
                    (chain, executor.submit(self.process_chain, chain, index))
                    for index, chain in indexed
                ]
                for chain, future in futures:
                    if cancel():
                        result.cancelled = True
                        for _, pending in futures:
                            pending.cancel()
                        break
                    outcomes.append((chain, future.result()))
            # Chains already running when cancelled have relabeled their residues; keep their output
            for chain, future in futures[len(outcomes):]:
                if not future.cancelled():
                    outcomes.append((chain, future.result()))
        else:
            for index, chain in indexed:
                if cancel():
                    result.cancelled = True
                    break
                outcomes.append((chain, self.process_chain(chain, index)))

        for chain, (summary, chunks, failure) in outcomes:
            if summary is not None:
                result.summaries[chain.id] = summary
            result.chunks.extend(chunks)
            if failure is not None:
                result.failures.append(failure)

        result.labels = self._labels(structure, [chain for chain, _ in outcomes])

        if result.cancelled:
            logger.info(f"Cancelled after {len(outcomes)} of {len(indexed)} chains")
        logger.info(
            f"Generated {len(result.chunks)} chunks ({result.vertex_count} vertices, "
            f"{result.triangle_count} triangles) for {len(outcomes)} chains"
        )
        return result

"""Command-line interface for cartoon mesh generation."""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from tqdm import tqdm

from ...config import ColorScheme, PipelineSettings, RepresentationMode, load_settings
from ...domain.errors import RibbonKitError
from ...infrastructure.repositories.structure_repository import StructureRepository, structure_id
from ...infrastructure.writers.mesh_writer import MeshWriter
from ...services.cartoon_service import CartoonService
from ...utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)


def setup_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        description="Generate cartoon/ribbon meshes from PDB structure files"
    )
    parser.add_argument(
        "inputs", nargs="+", help="Structure files or directories containing them"
    )
    parser.add_argument(
        "-o", "--output-dir", required=True, help="Directory for output files"
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in RepresentationMode],
        help="Representation (default: cartoon, or the config file's value)",
    )
    parser.add_argument(
        "--color-scheme",
        choices=[c.value for c in ColorScheme],
        help="Vertex coloring (default: secondary)",
    )
    parser.add_argument("--chains", nargs="+", help="Only draw these chain IDs")
    parser.add_argument("--config", help="JSON settings file")
    parser.add_argument(
        "--format", choices=MeshWriter.FORMATS, default="json", help="Output format"
    )
    parser.add_argument(
        "--workers", type=int, default=1, help="Chains processed in parallel per file"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Show detailed processing information"
    )
    parser.add_argument("--log-file", help="Also write the log to this file")
    return parser


def collect_inputs(inputs: Sequence[str]) -> List[Path]:
    """Expand directories through the repository; keep files as given."""
    paths = []
    for item in inputs:
        if os.path.isdir(item):
            paths.extend(StructureRepository(item).paths())
        else:
            paths.append(Path(item))
    return paths


def build_settings(args: argparse.Namespace) -> PipelineSettings:
    settings = load_settings(args.config) if args.config else PipelineSettings()
    overrides = {}
    if args.mode:
        overrides["representation"] = args.mode
    if args.color_scheme:
        overrides["color_scheme"] = args.color_scheme
    return settings.with_overrides(**overrides) if overrides else settings


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for cartoon generation CLI."""
    parser = setup_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    try:
        settings = build_settings(args)
    except RibbonKitError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    os.makedirs(args.output_dir, exist_ok=True)
    service = CartoonService(settings)
    writer = MeshWriter()

    paths = collect_inputs(args.inputs)
    if not paths:
        logger.error("No structure files found")
        return 1

    failed = 0
    repository = StructureRepository(os.getcwd(), parser=service.parser)
    for path in tqdm(paths, desc="Generating cartoons", disable=len(paths) < 2):
        name = structure_id(path) or path.stem
        try:
            structure = repository.load(path)
            result = service.build(structure, chain_ids=args.chains, max_workers=args.workers)
        except (OSError, RibbonKitError, ValueError) as e:
            logger.error(f"Failed to process {path}: {e}")
            failed += 1
            continue

        if not result.chunks:
            logger.warning(f"No geometry generated for {path}")
            failed += 1
            continue

        out_path = Path(args.output_dir) / f"{name}.{args.format}"
        writer.write(result, out_path, args.format)
        logger.info(f"{path.name}: {len(result.chunks)} chunks -> {out_path}")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Run a conversion directly, without the API server.

Usage:
    python scripts/convert_local.py <operation> <input file> [output dir] [level]

The input is copied into the scratch directory exactly like an upload,
converted with the configured tools, and the result is copied to the
output directory under its download name.
"""

import shutil
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger

from pdf_tools.config import settings
from pdf_tools.exceptions import ConversionError
from pdf_tools.main import prepare_scratch
from pdf_tools.models.conversion import JobOptions
from pdf_tools.services.intake import copy_to_scratch
from pdf_tools.services.orchestrator import ConversionOrchestrator
from pdf_tools.services.registry import build_registry
from pdf_tools.services.tracker import TempArtifactTracker


def main() -> int:
    """Run one conversion."""
    if len(sys.argv) < 3:
        logger.error("Usage: convert_local.py <operation> <input file> [output dir] [level]")
        return 2

    operation = sys.argv[1]
    source = Path(sys.argv[2])
    destination_dir = Path(sys.argv[3]) if len(sys.argv) > 3 else Path.cwd()
    level = sys.argv[4] if len(sys.argv) > 4 else None

    if not source.is_file():
        logger.error(f"Input file not found: {source}")
        return 1

    scratch_dir = prepare_scratch(settings)
    registry = build_registry(settings)
    orchestrator = ConversionOrchestrator.from_settings(registry, settings)
    destination_dir.mkdir(parents=True, exist_ok=True)

    logger.info(f"Converting {source} ({source.stat().st_size:,} bytes) with {operation}")

    with TempArtifactTracker() as tracker:
        descriptor = copy_to_scratch(source, scratch_dir)
        try:
            job = orchestrator.convert(
                descriptor, operation, JobOptions(level=level, image_quality=settings.IMAGE_QUALITY), tracker
            )
        except ConversionError as exc:
            logger.error(f"✗ Conversion failed ({exc.error_type}): {exc}")
            return 1

        target = destination_dir / job.download_name
        shutil.copyfile(job.output_path, target)

    logger.info(f"✓ Wrote {target} ({target.stat().st_size:,} bytes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Services package for the PDF Tools Backend.

This package contains the conversion job pipeline and its collaborators.
"""

from .executor import ConversionExecutor, ExecutionResult
from .intake import copy_to_scratch, save_upload, scratch_name
from .orchestrator import ConversionOrchestrator, DeliverySink
from .registry import (
    ConverterProfile,
    ConverterRegistry,
    build_registry,
    compressed_prefix,
    stem_with_extension,
)
from .resolver import OutputResolver
from .tracker import TempArtifactTracker

__all__ = [
    # Registry
    "ConverterProfile",
    "ConverterRegistry",
    "build_registry",
    "compressed_prefix",
    "stem_with_extension",
    # Pipeline stages
    "ConversionExecutor",
    "ExecutionResult",
    "OutputResolver",
    "TempArtifactTracker",
    # Orchestration
    "ConversionOrchestrator",
    "DeliverySink",
    # Upload intake
    "save_upload",
    "copy_to_scratch",
    "scratch_name",
]

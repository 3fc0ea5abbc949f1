"""
Conversion modules for the SOAR playbook converter.

This module contains the two document mappers, the converter entry
point and advisory format detection.
"""

from .converter import DIRECTION_AUTO, SoarConverter, build_trace_logger, parse_document
from .detection import FormatDetection, detect_format, document_stats
from .fas_to_fsr import FASToFSRConverter
from .fsr_to_fas import FSRToFASConverter

__all__ = [
    "DIRECTION_AUTO",
    "SoarConverter",
    "build_trace_logger",
    "parse_document",
    "FormatDetection",
    "detect_format",
    "document_stats",
    "FASToFSRConverter",
    "FSRToFASConverter",
]

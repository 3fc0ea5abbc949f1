"""
Utility modules for the SOAR playbook converter.

This module contains constants, exceptions, identifier/timestamp helpers,
reference rewriting and the trace logger used throughout the package.
"""

from .constants import *
from .exceptions import *
from .identifiers import IdentifierFactory, extract_uuid, resolve_priority, find_step_name
from .timestamps import TimestampNormalizer
from .references import ReferenceConvention, clone, normalize_step_reference, rewrite_step_references
from .positions import coerce_int, canvas_offset
from .conversion_summary import FallbackCategory, ConversionItem, ConversionReporter
from .trace_logger import TraceLogger, VerbosityLevel

__all__ = [
    # Constants
    "FSR_DOCUMENT_TYPE",
    "FAS_DOCUMENT_TYPE",
    "DIRECTION_FSR_TO_FAS",
    "DIRECTION_FAS_TO_FSR",
    "DIRECTIONS",
    "SET_VARIABLE_STEP_TYPE",
    "FAS_REFERENCED_START_STEP_TYPE",
    "FALLBACK_ARGUMENT_KEY",
    "ORIGINAL_START_ARGUMENT_KEY",
    "DEFAULT_CONFIG_PATH",
    # Exceptions
    "ConverterError",
    "ConfigurationError",
    "FormatMismatchError",
    "InvalidDocumentError",
    # Helpers
    "IdentifierFactory",
    "extract_uuid",
    "resolve_priority",
    "find_step_name",
    "TimestampNormalizer",
    "ReferenceConvention",
    "clone",
    "normalize_step_reference",
    "rewrite_step_references",
    "coerce_int",
    "canvas_offset",
    "FallbackCategory",
    "ConversionItem",
    "ConversionReporter",
    "TraceLogger",
    "VerbosityLevel",
]

"""
Generator modules for the SOAR playbook converter.

This module contains factories that build derived structures:
fallback-encoded substitute steps and FAS version snapshots.
"""

from .fallback_factory import FallbackStepFactory, decode_original_step, extract_input_param_names
from .version_factory import VersionSnapshotFactory

__all__ = [
    "FallbackStepFactory",
    "VersionSnapshotFactory",
    "decode_original_step",
    "extract_input_param_names",
]

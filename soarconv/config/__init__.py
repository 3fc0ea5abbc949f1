"""
Configuration management module for the SOAR playbook converter.

This module handles loading and validation of configuration files and
holds the step type tables used for classification.
"""

from .loader import ConfigLoader
from .models import ConverterConfig, StepTypesConfig, CanvasConfig, OutputConfig, TraceLogConfig
from .step_type_rules import (
    StepClassification,
    StepKind,
    StepTypeClassifier,
    StepTypeRegistry,
    strip_step_type,
)

__all__ = [
    "ConfigLoader",
    "ConverterConfig",
    "StepTypesConfig",
    "CanvasConfig",
    "OutputConfig",
    "TraceLogConfig",
    "StepClassification",
    "StepKind",
    "StepTypeClassifier",
    "StepTypeRegistry",
    "strip_step_type",
]

"""
Data models for converter configuration.

This module provides structured data classes for the optional
soarconv_config.json file, with validation of each section.
"""

from dataclasses import dataclass, field
from typing import Dict, Any

from .step_type_rules import StepTypeRegistry
from ..utils.constants import DEFAULT_MIN_LEFT, DEFAULT_MIN_TOP, DEFAULT_TRACE_LOG_DIR
from ..utils.exceptions import ConfigurationError


def _section(config_dict: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config_dict.get(name, {})
    if not isinstance(section, dict):
        raise ConfigurationError(f"Configuration section '{name}' must be an object")
    return section


def _label_table(section: Dict[str, Any], key: str) -> Dict[str, str]:
    table = section.get(key, {})
    if not isinstance(table, dict):
        raise ConfigurationError(f"step_types.{key} must be an object mapping step type ids to labels")
    return {str(type_id): str(label) for type_id, label in table.items()}


@dataclass
class StepTypesConfig:
    """Extra step type entries merged over the built-in tables."""
    trigger_start: Dict[str, str] = field(default_factory=dict)
    unsupported: Dict[str, str] = field(default_factory=dict)
    supported: Dict[str, str] = field(default_factory=dict)

    def build_registry(self) -> StepTypeRegistry:
        """
        Build the registry used by the classifier.

        Raises:
            ConfigurationError: If the merged tables share an identifier
        """
        return StepTypeRegistry.default().extended(
            trigger_start=self.trigger_start,
            unsupported=self.unsupported,
            supported=self.supported,
        )


@dataclass
class CanvasConfig:
    """Minimum canvas coordinates for FSR workflows."""
    min_top: int = DEFAULT_MIN_TOP
    min_left: int = DEFAULT_MIN_LEFT

    def validate(self) -> None:
        for name in ("min_top", "min_left"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ConfigurationError(f"canvas.{name} must be a non-negative integer, got {value!r}")


@dataclass
class OutputConfig:
    """Configuration for output file settings."""
    indent: int = 2
    include_date: bool = True


@dataclass
class TraceLogConfig:
    """Configuration for trace logging settings."""
    enabled: bool = False
    verbosity: str = "normal"  # minimal, normal, detailed, debug
    output_directory: str = DEFAULT_TRACE_LOG_DIR

    def validate(self) -> None:
        """
        Validate trace log configuration.

        Raises:
            ConfigurationError: If verbosity level is invalid
        """
        valid_levels = ["minimal", "normal", "detailed", "debug"]
        if not isinstance(self.verbosity, str) or self.verbosity.lower() not in valid_levels:
            raise ConfigurationError(f"Invalid verbosity level: {self.verbosity}. Must be one of {valid_levels}")


@dataclass
class ConverterConfig:
    """Main configuration class containing all config sections."""
    step_types: StepTypesConfig = field(default_factory=StepTypesConfig)
    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    trace_log: TraceLogConfig = field(default_factory=TraceLogConfig)
    version: str = "1"

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ConverterConfig':
        """
        Create ConverterConfig from dictionary (parsed from JSON).

        Every section is optional; missing values take the built-in defaults.

        Args:
            config_dict: Dictionary containing configuration data

        Returns:
            ConverterConfig instance

        Raises:
            ConfigurationError: If a section is malformed
        """
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration root must be a JSON object")

        step_types_section = _section(config_dict, 'step_types')
        step_types = StepTypesConfig(
            trigger_start=_label_table(step_types_section, 'trigger_start'),
            unsupported=_label_table(step_types_section, 'unsupported'),
            supported=_label_table(step_types_section, 'supported')
        )
        step_types.build_registry()

        canvas_section = _section(config_dict, 'canvas')
        canvas = CanvasConfig(
            min_top=canvas_section.get('min_top', DEFAULT_MIN_TOP),
            min_left=canvas_section.get('min_left', DEFAULT_MIN_LEFT)
        )
        canvas.validate()

        output_section = _section(config_dict, 'output')
        output = OutputConfig(
            indent=output_section.get('indent', 2),
            include_date=output_section.get('include_date', True)
        )

        trace_log_section = _section(config_dict, 'trace_log')
        trace_log = TraceLogConfig(
            enabled=trace_log_section.get('enabled', False),
            verbosity=trace_log_section.get('verbosity', 'normal'),
            output_directory=trace_log_section.get('output_directory', DEFAULT_TRACE_LOG_DIR)
        )
        trace_log.validate()

        return cls(
            step_types=step_types,
            canvas=canvas,
            output=output,
            trace_log=trace_log,
            version=str(config_dict.get('version', '1'))
        )

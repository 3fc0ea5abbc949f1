"""
Conversion entry point for the SOAR playbook converter.

SoarConverter wires configuration, the step-type classifier, the
identifier factory, the clock and the optional trace logger into the two
document mappers, and offers auto-detected conversion for callers that
do not know which export they hold.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .detection import detect_format
from .fas_to_fsr import FASToFSRConverter
from .fsr_to_fas import FSRToFASConverter
from ..config.models import ConverterConfig, TraceLogConfig
from ..config.step_type_rules import StepTypeClassifier
from ..utils.constants import DIRECTION_FAS_TO_FSR, DIRECTION_FSR_TO_FAS, DIRECTIONS
from ..utils.exceptions import FormatMismatchError, InvalidDocumentError
from ..utils.identifiers import IdentifierFactory
from ..utils.timestamps import TimestampNormalizer
from ..utils.trace_logger import TraceLogger, VerbosityLevel

DIRECTION_AUTO = "auto"


def parse_document(text: str) -> Any:
    """
    Parse a JSON export from text.

    Raises:
        InvalidDocumentError: If the text is not valid JSON
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidDocumentError(f"Invalid JSON: {e}") from e


def build_trace_logger(trace_log_config: Optional[TraceLogConfig]) -> Optional[TraceLogger]:
    """Create a TraceLogger when the configuration enables one."""
    if not trace_log_config or not trace_log_config.enabled:
        return None
    return TraceLogger(
        enabled=True,
        verbosity=VerbosityLevel.from_string(trace_log_config.verbosity),
        output_directory=Path(trace_log_config.output_directory)
    )


class SoarConverter:
    """
    Bidirectional FSR / FAS converter.

    Each call builds fresh output structures and, for FSR → FAS, a fresh
    conversion summary; instances hold no per-document state.
    """

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        id_factory: Optional[IdentifierFactory] = None,
        clock: Optional[Callable[[], datetime]] = None,
        trace_logger: Optional[TraceLogger] = None
    ):
        self.config = config or ConverterConfig()
        self.id_factory = id_factory or IdentifierFactory()
        self.timestamps = TimestampNormalizer(clock)
        self.trace_logger = trace_logger or build_trace_logger(self.config.trace_log)
        self.classifier = StepTypeClassifier(self.config.step_types.build_registry())

        self.fsr_to_fas_converter = FSRToFASConverter(
            classifier=self.classifier,
            id_factory=self.id_factory,
            timestamps=self.timestamps,
            trace_logger=self.trace_logger
        )
        self.fas_to_fsr_converter = FASToFSRConverter(
            id_factory=self.id_factory,
            timestamps=self.timestamps,
            canvas=self.config.canvas,
            trace_logger=self.trace_logger
        )

    def fsr_to_fas(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Convert an FSR ``workflow_collections`` export to FAS."""
        return self.fsr_to_fas_converter.convert(document)

    def fas_to_fsr(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Convert a FAS ``playbook_collections`` export to FSR."""
        return self.fas_to_fsr_converter.convert(document)

    def resolve_direction(self, document: Any, direction: str = DIRECTION_AUTO) -> str:
        """
        Resolve the direction to convert a document in.

        Args:
            document: Parsed input document
            direction: ``auto`` or one of the explicit directions

        Returns:
            Explicit conversion direction

        Raises:
            ValueError: If the direction name is unknown
            FormatMismatchError: If ``auto`` cannot recognise the document
        """
        if direction in DIRECTIONS:
            return direction
        if direction != DIRECTION_AUTO:
            raise ValueError(f"Unknown direction: {direction}. Must be one of: {[DIRECTION_AUTO] + DIRECTIONS}")

        detection = detect_format(document)
        if detection is None:
            raise FormatMismatchError(
                "Could not detect document format: expected 'workflow_collections' or 'playbook_collections'"
            )
        return detection.suggested_direction

    def convert(self, document: Any, direction: str = DIRECTION_AUTO) -> Dict[str, Any]:
        """
        Convert a document in the requested (or detected) direction.

        Args:
            document: Parsed input document
            direction: ``auto``, ``fsr-to-fas`` or ``fas-to-fsr``

        Returns:
            Converted document

        Raises:
            FormatMismatchError: If the document does not match the direction
        """
        resolved = self.resolve_direction(document, direction)
        if resolved == DIRECTION_FSR_TO_FAS:
            return self.fsr_to_fas(document)
        if resolved == DIRECTION_FAS_TO_FSR:
            return self.fas_to_fsr(document)
        raise ValueError(f"Unhandled direction: {resolved}")

    def convert_text(self, text: str, direction: str = DIRECTION_AUTO) -> Dict[str, Any]:
        """Parse a JSON export and convert it."""
        return self.convert(parse_document(text), direction)

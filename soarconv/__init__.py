"""
soarconv - SOAR Playbook Converter
==================================

Converts automation definitions between the FSR ``workflow_collections``
export and the FAS ``playbook_collections`` export.

- Step-type classification against configurable registries
- Cross-reference rewriting between absolute and relative step paths
- Lossless fallback encoding of steps the target cannot run
- Conversion summary and FAS version snapshots for FSR → FAS
"""

from .version import VERSION as __version__

# Main components
from .config.loader import ConfigLoader
from .config.models import ConverterConfig
from .converters.converter import SoarConverter
from .converters.detection import FormatDetection, detect_format

__all__ = [
    "__version__",
    "ConfigLoader",
    "ConverterConfig",
    "SoarConverter",
    "FormatDetection",
    "detect_format",
]

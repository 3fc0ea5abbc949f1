"""
Advisory format detection and document statistics.

Detection only inspects the top-level discriminator and counts what the
document holds; it never validates the document and is not part of the
conversion contract.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from ..utils.constants import (
    DIRECTION_FAS_TO_FSR,
    DIRECTION_FSR_TO_FAS,
    FAS_DOCUMENT_TYPE,
    FSR_DOCUMENT_TYPE,
)

FORMAT_FSR = 'fsr'
FORMAT_FAS = 'fas'


@dataclass
class FormatDetection:
    """What a document looks like and which direction converts it."""
    format: str
    collections: int = 0
    items: int = 0
    has_versions: bool = False

    @property
    def suggested_direction(self) -> str:
        return DIRECTION_FSR_TO_FAS if self.format == FORMAT_FSR else DIRECTION_FAS_TO_FSR

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['suggested_direction'] = self.suggested_direction
        return result


def _count_items(collections: Any, key: str) -> int:
    total = 0
    for collection in collections:
        if isinstance(collection, dict) and isinstance(collection.get(key), list):
            total += len(collection[key])
    return total


def detect_format(document: Any) -> Optional[FormatDetection]:
    """
    Detect whether a parsed document is an FSR or a FAS export.

    Args:
        document: Parsed JSON document

    Returns:
        FormatDetection, or None when the discriminator is not recognised
    """
    if not isinstance(document, dict) or not document.get('type'):
        return None

    collections = document.get('data')
    if not isinstance(collections, list):
        collections = []

    if document['type'] == FSR_DOCUMENT_TYPE:
        return FormatDetection(
            format=FORMAT_FSR,
            collections=len(collections),
            items=_count_items(collections, 'workflows')
        )

    if document['type'] == FAS_DOCUMENT_TYPE:
        versions = document.get('versions')
        return FormatDetection(
            format=FORMAT_FAS,
            collections=len(collections),
            items=_count_items(collections, 'playbooks'),
            has_versions=isinstance(versions, list) and len(versions) > 0
        )

    return None


def document_stats(document: Dict[str, Any], direction: str) -> Dict[str, int]:
    """
    Count collections, definitions, steps and routes of a converted document.

    Args:
        document: Output of a conversion
        direction: Direction the document was produced with

    Returns:
        Dictionary with ``collections``, ``definitions``, ``steps`` and ``routes``
    """
    key = 'playbooks' if direction == DIRECTION_FSR_TO_FAS else 'workflows'
    stats = {'collections': 0, 'definitions': 0, 'steps': 0, 'routes': 0}

    collections = document.get('data') or []
    stats['collections'] = len(collections)
    for collection in collections:
        definitions = collection.get(key) or []
        stats['definitions'] += len(definitions)
        for definition in definitions:
            stats['steps'] += len(definition.get('steps') or [])
            stats['routes'] += len(definition.get('routes') or [])

    return stats

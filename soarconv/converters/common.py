"""
Helpers shared by both conversion directions.
"""

from typing import Any, Dict, List, Optional

from ..utils.exceptions import FormatMismatchError

TRIGGER_NAME_HINTS = ('start', 'trigger')


def require_document_type(document: Any, expected_type: str, message: str) -> List[Dict[str, Any]]:
    """
    Check the top-level discriminator and return the collection list.

    Args:
        document: Parsed input document
        expected_type: Required value of the ``type`` field
        message: Error message for a mismatch

    Returns:
        The document's ``data`` list (empty when absent)

    Raises:
        FormatMismatchError: If the discriminator or ``data`` shape is wrong
    """
    if not isinstance(document, dict) or document.get('type') != expected_type:
        raise FormatMismatchError(message)

    collections = document.get('data') or []
    if not isinstance(collections, list):
        raise FormatMismatchError(f"{message} ('data' must be a list of collections)")
    return collections


def select_trigger_step(steps: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Pick the trigger step of a definition that does not name one.

    First step whose name contains "start" or "trigger" (case-insensitive),
    else the first step, else None.
    """
    if not steps:
        return None
    for step in steps:
        name = str(step.get('name') or '').lower()
        if any(hint in name for hint in TRIGGER_NAME_HINTS):
            return step
    return steps[0]


def default_bool(source: Dict[str, Any], key: str, default: bool) -> Any:
    """Return ``source[key]`` unless it is missing or null; ``False`` is kept."""
    value = source.get(key)
    return default if value is None else value

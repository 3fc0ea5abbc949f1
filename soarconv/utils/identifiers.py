"""
Identifier and reference helpers.

Generation of opaque identifiers is isolated behind IdentifierFactory so
tests and callers can substitute deterministic identifiers.
"""

import random
import uuid
from typing import Any, Dict, List, Optional

from .constants import FAS_DEFAULT_PRIORITY
from .references import clone


class IdentifierFactory:
    """Produces the random identifiers a conversion needs."""

    def new_uuid(self) -> str:
        """Return a new random (version 4) UUID string."""
        return str(uuid.uuid4())

    def new_numeric_id(self) -> int:
        """Return a small numeric record id, as FSR exports carry."""
        return random.randint(0, 9999)


def extract_uuid(ref: Any) -> Any:
    """
    Extract the bare identifier from a URI-style reference.

    ``/api/3/workflow_steps/abc`` and ``api/3/workflow_steps/abc`` both
    yield ``abc``. Values without a slash are returned unchanged and empty
    values yield None.

    Args:
        ref: Reference string (or bare identifier)

    Returns:
        Bare identifier, or None for an empty reference
    """
    if not ref:
        return None
    if isinstance(ref, str) and "/" in ref:
        return ref.rstrip("/").split("/")[-1]
    return ref


def resolve_priority(priority_ref: Any) -> Any:
    """Map an FSR priority reference to the FAS display value."""
    if not priority_ref:
        return FAS_DEFAULT_PRIORITY
    if isinstance(priority_ref, str) and "picklists" in priority_ref:
        return FAS_DEFAULT_PRIORITY
    return clone(priority_ref)


def find_step_name(step_ref: Any, steps: Optional[List[Dict[str, Any]]]) -> str:
    """Return the name of the step a reference points at, or 'Unknown'."""
    step_uuid = extract_uuid(step_ref)
    for step in steps or []:
        if step.get("uuid") == step_uuid:
            return step.get("name") or ""
    return "Unknown"

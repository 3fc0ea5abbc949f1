"""
Cross-reference rewriting inside step argument payloads.

Two embedded reference shapes point at other steps of the same definition:

- Decision branches: ``arguments.conditions[].step_iri``
- Manual input routing: ``arguments.response_mapping.options[].step_uuid``

FSR expects absolute paths (``/api/3/workflow_steps/{id}``), FAS expects
relative paths (``api/3/workflow_steps/{id}``). Rewriting normalises bare
identifiers and either path form to the target convention, always on a
deep copy of the payload.
"""

import copy
from enum import Enum
from typing import Any, Dict

from .constants import FAS_STEP_PATH, FSR_STEP_PATH


class ReferenceConvention(Enum):
    """Step reference encodings used by the two schemas."""
    ABSOLUTE = FSR_STEP_PATH
    RELATIVE = FAS_STEP_PATH


def clone(value: Any) -> Any:
    """Structural deep copy used at every mutation boundary."""
    return copy.deepcopy(value)


def normalize_step_reference(ref: Any, convention: ReferenceConvention) -> Any:
    """
    Rewrite one step reference to the target convention.

    Non-string and empty values are returned untouched.

    Args:
        ref: Bare identifier, absolute path or relative path
        convention: Target encoding

    Returns:
        The reference in the target encoding
    """
    if not isinstance(ref, str) or not ref:
        return ref

    if convention is ReferenceConvention.ABSOLUTE:
        if ref.startswith(FSR_STEP_PATH):
            return ref
        if ref.startswith(FAS_STEP_PATH):
            return "/" + ref
        return FSR_STEP_PATH + ref

    if ref.startswith(FAS_STEP_PATH):
        return ref
    if ref.startswith(FSR_STEP_PATH):
        return ref[1:]
    return FAS_STEP_PATH + ref


def rewrite_decision_conditions(arguments: Dict[str, Any], convention: ReferenceConvention) -> Dict[str, Any]:
    """Rewrite ``conditions[].step_iri`` targets. Returns a new payload."""
    rewritten = clone(arguments)
    conditions = rewritten.get("conditions")
    if isinstance(conditions, list):
        for condition in conditions:
            if isinstance(condition, dict) and isinstance(condition.get("step_iri"), str):
                condition["step_iri"] = normalize_step_reference(condition["step_iri"], convention)
    return rewritten


def rewrite_response_mapping(arguments: Dict[str, Any], convention: ReferenceConvention) -> Dict[str, Any]:
    """Rewrite ``response_mapping.options[].step_uuid`` targets. Returns a new payload."""
    rewritten = clone(arguments)
    response_mapping = rewritten.get("response_mapping")
    if isinstance(response_mapping, dict) and isinstance(response_mapping.get("options"), list):
        for option in response_mapping["options"]:
            if isinstance(option, dict) and isinstance(option.get("step_uuid"), str):
                option["step_uuid"] = normalize_step_reference(option["step_uuid"], convention)
    return rewritten


def rewrite_step_references(arguments: Any, convention: ReferenceConvention) -> Any:
    """
    Apply both rewrites to a step argument payload.

    The caller's payload is never mutated; rewriting does not check that
    the referenced step exists.

    Args:
        arguments: Step ``arguments`` payload
        convention: Target encoding

    Returns:
        A rewritten deep copy (non-dict payloads are copied unchanged)
    """
    if not isinstance(arguments, dict):
        return clone(arguments)
    rewritten = rewrite_decision_conditions(arguments, convention)
    return rewrite_response_mapping(rewritten, convention)

"""
Step Type Classification Rules

This module centralizes the step type tables used to decide how each FSR
step is carried over to FAS. The tables are data: they are wrapped in an
immutable StepTypeRegistry that is injected into the classifier, and can be
extended from configuration without touching the classification logic.

Every step type identifier falls into exactly one class:

- TRIGGER_START: FSR start steps (UI button, record create/update, API route)
- KNOWN_UNSUPPORTED: steps FAS cannot run
- KNOWN_SUPPORTED: steps FAS runs as-is
- UNKNOWN: anything absent from all three tables
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from ..utils.constants import FSR_STEP_TYPE_PATH
from ..utils.exceptions import ConfigurationError


# ============================================================================
# DEFAULT STEP TYPE TABLES
# ============================================================================

DEFAULT_TRIGGER_START_STEP_TYPES: Dict[str, str] = {
    'f414d039-bb0d-4e59-9c39-a8f1e880b18a': 'Manual Start',
    'ea155646-3821-4542-9702-b246da430a8d': 'On Create',
    '9300bf69-5063-486d-b3a6-47eb9da24872': 'On Update',
    'df26c7a2-4166-4ca5-91e5-548e24c01b5f': 'API Endpoint',
}

DEFAULT_UNSUPPORTED_STEP_TYPES: Dict[str, str] = {
    '2597053c-e718-44b4-8394-4d40fe26d357': 'Create Record',
    'b593663d-7d13-40ce-a3a3-96dece928722': 'Update Record',
    'b593663d-7d13-40ce-a3a3-96dece928770': 'Find Record',
    '1fdd14cc-d6b4-4335-a3af-ab49c8ed2fd8': 'Code Snippet',
    '7b221880-716b-4726-a2ca-5e568d330b3e': 'Ingest Bulk Feed',
}

DEFAULT_SUPPORTED_STEP_TYPES: Dict[str, str] = {
    'b348f017-9a94-471f-87f8-ce88b6a7ad62': 'Start/Trigger (FAS Referenced)',
    '04d0cf46-b6a8-42c4-8683-60a7eaa69e8f': 'Set Variables',
    '12254cf5-5db7-4b1a-8cb1-3af081924b28': 'Decision',
    '74932bdc-b8b6-4d24-88c4-1a4dfbc524f3': 'Reference Playbook',
    '6832e556-b9c7-497a-babe-feda3bd27dbf': 'Wait',
    'fc04082a-d7dc-4299-96fb-6837b1baa0fe': 'Manual Input',
    '0bfed618-0316-11e7-93ae-92361f002671': 'Connector',
    '0109f35d-090b-4a2b-bd8a-94cbc3508562': 'Utility/No-Op',
    '0bfed618-0316-11e7-93ae-92361f002675': 'Email',
    '0bfed618-0316-11e7-93ae-92361f002674': 'Attachment',
}

UNKNOWN_START_LABEL = 'Unknown Start'
UNKNOWN_STEP_TYPE_LABEL = 'Unknown Step Type'


# ============================================================================
# CLASSIFICATION RESULT
# ============================================================================

class StepKind(Enum):
    """The four classes a step type identifier can fall into."""
    TRIGGER_START = 'trigger-start'
    KNOWN_UNSUPPORTED = 'unsupported'
    KNOWN_SUPPORTED = 'supported'
    UNKNOWN = 'unknown'


@dataclass(frozen=True)
class StepClassification:
    """Outcome of classifying one step type identifier."""
    kind: StepKind
    step_type: str
    label: Optional[str] = None

    @property
    def is_supported(self) -> bool:
        return self.kind is StepKind.KNOWN_SUPPORTED


def strip_step_type(step_type: Any) -> str:
    """
    Return the bare step type identifier.

    Handles ``/api/3/workflow_step_types/{id}`` references, bare
    identifiers and missing values (empty string).
    """
    if not step_type:
        return ''
    step_type = str(step_type)
    if step_type.startswith(FSR_STEP_TYPE_PATH):
        return step_type[len(FSR_STEP_TYPE_PATH):]
    if '/' in step_type:
        return step_type.rstrip('/').split('/')[-1]
    return step_type


# ============================================================================
# REGISTRY
# ============================================================================

def _frozen(table: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return MappingProxyType(dict(table or {}))


@dataclass(frozen=True)
class StepTypeRegistry:
    """
    Immutable set of the three step type tables.

    Raises:
        ConfigurationError: If an identifier appears in more than one table
    """
    trigger_start: Mapping[str, str] = field(default_factory=dict)
    unsupported: Mapping[str, str] = field(default_factory=dict)
    supported: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'trigger_start', _frozen(self.trigger_start))
        object.__setattr__(self, 'unsupported', _frozen(self.unsupported))
        object.__setattr__(self, 'supported', _frozen(self.supported))

        overlaps = (
            (set(self.trigger_start) & set(self.unsupported))
            | (set(self.trigger_start) & set(self.supported))
            | (set(self.unsupported) & set(self.supported))
        )
        if overlaps:
            raise ConfigurationError(
                f"Step type registries must be disjoint; shared identifiers: {sorted(overlaps)}"
            )

    @classmethod
    def default(cls) -> 'StepTypeRegistry':
        return cls(
            trigger_start=DEFAULT_TRIGGER_START_STEP_TYPES,
            unsupported=DEFAULT_UNSUPPORTED_STEP_TYPES,
            supported=DEFAULT_SUPPORTED_STEP_TYPES,
        )

    def extended(
        self,
        trigger_start: Optional[Mapping[str, str]] = None,
        unsupported: Optional[Mapping[str, str]] = None,
        supported: Optional[Mapping[str, str]] = None
    ) -> 'StepTypeRegistry':
        """
        Return a new registry with extra entries merged over this one.

        Args:
            trigger_start: Extra trigger-start types (id -> label)
            unsupported: Extra unsupported types (id -> label)
            supported: Extra supported types (id -> label)

        Returns:
            New StepTypeRegistry

        Raises:
            ConfigurationError: If the merged tables are not disjoint
        """
        return StepTypeRegistry(
            trigger_start={**self.trigger_start, **(trigger_start or {})},
            unsupported={**self.unsupported, **(unsupported or {})},
            supported={**self.supported, **(supported or {})},
        )


# ============================================================================
# CLASSIFIER
# ============================================================================

class StepTypeClassifier:
    """Classifies step types against an injected StepTypeRegistry."""

    def __init__(self, registry: Optional[StepTypeRegistry] = None):
        self.registry = registry or StepTypeRegistry.default()

    def classify(self, step_type: Any) -> StepClassification:
        """
        Classify a step type identifier.

        Args:
            step_type: Bare identifier or ``/api/3/workflow_step_types/`` reference

        Returns:
            StepClassification with the kind and the table label (None for UNKNOWN)
        """
        type_id = strip_step_type(step_type)
        registry = self.registry

        if type_id in registry.trigger_start:
            return StepClassification(StepKind.TRIGGER_START, type_id, registry.trigger_start[type_id])
        if type_id in registry.unsupported:
            return StepClassification(StepKind.KNOWN_UNSUPPORTED, type_id, registry.unsupported[type_id])
        if type_id in registry.supported:
            return StepClassification(StepKind.KNOWN_SUPPORTED, type_id, registry.supported[type_id])
        return StepClassification(StepKind.UNKNOWN, type_id)

"""
Fallback step factory.

Builds FAS substitutes for FSR steps that have no FAS equivalent. The
complete original step is serialised to a JSON string inside the
substitute's arguments, so it can always be recovered from the converted
playbook.

- Unsupported and unknown steps become Set Variable steps holding the
  original under ``_tmp``, with an ``UNSUPPORTED:`` / ``UNKNOWN:`` name prefix.
- FSR trigger-start steps become FAS referenced start steps holding the
  original under ``_originalStartStep``.
"""

import json
from typing import Any, Dict, List, Optional

from ..config.step_type_rules import (
    StepClassification,
    StepKind,
    UNKNOWN_START_LABEL,
    UNKNOWN_STEP_TYPE_LABEL,
)
from ..utils.constants import (
    FALLBACK_ARGUMENT_KEY,
    FAS_REFERENCED_START_STEP_TYPE,
    ORIGINAL_START_ARGUMENT_KEY,
    SET_VARIABLE_STEP_TYPE,
)
from ..utils.conversion_summary import ConversionItem, ConversionReporter, FallbackCategory
from ..utils.identifiers import IdentifierFactory
from ..utils.references import clone

# Step fields carried verbatim into the preserved original
PRESERVED_STEP_FIELDS = [
    '@type', 'name', 'description', 'stepType', 'arguments',
    'status', 'top', 'left', 'group', 'uuid',
]


def decode_original_step(payload: str) -> Dict[str, Any]:
    """Decode the original step from a ``_tmp`` / ``_originalStartStep`` value."""
    return json.loads(payload)


def extract_input_param_names(arguments: Dict[str, Any]) -> List[str]:
    """
    Collect declared input parameter names from a trigger's variable block.

    ``step_variables.input.params`` may be an object keyed by parameter
    name or a list of names / ``{"name": ...}`` objects.
    """
    step_variables = arguments.get('step_variables')
    if not isinstance(step_variables, dict):
        return []
    input_block = step_variables.get('input')
    if not isinstance(input_block, dict):
        return []
    params = input_block.get('params')

    if isinstance(params, dict):
        return list(params.keys())
    if isinstance(params, list):
        names = []
        for param in params:
            if isinstance(param, str):
                names.append(param)
            elif isinstance(param, dict) and param.get('name'):
                names.append(str(param['name']))
        return names
    return []


class FallbackStepFactory:
    """
    Factory for fallback-encoded FAS steps.

    Every substitute reports exactly one ConversionItem to the reporter
    passed in by the mapper.
    """

    def __init__(self, id_factory: Optional[IdentifierFactory] = None):
        self.id_factory = id_factory or IdentifierFactory()

    def preserve_original(self, step: Dict[str, Any], note: str) -> Dict[str, Any]:
        """
        Copy every preserved field of the original step.

        Fields absent from the original stay absent so decoding reproduces
        the step exactly. ``arguments`` defaults to an empty object.

        Args:
            step: Original FSR step
            note: Human-readable ``_conversionNote``

        Returns:
            Deep copy of the original step plus the note
        """
        original = {}
        for key in PRESERVED_STEP_FIELDS:
            if key in step:
                original[key] = clone(step[key])
        # Missing and null arguments both decode as an empty object
        if original.get('arguments') is None:
            original['arguments'] = {}
        original['_conversionNote'] = note
        return original

    def encode_original(self, step: Dict[str, Any], note: str) -> str:
        return json.dumps(self.preserve_original(step, note), indent=2, ensure_ascii=False)

    def create(
        self,
        step: Dict[str, Any],
        playbook_uuid: str,
        classification: StepClassification,
        reporter: ConversionReporter
    ) -> Dict[str, Any]:
        """
        Build the substitute for a step that cannot be carried over directly.

        Args:
            step: Original FSR step
            playbook_uuid: UUID of the FAS playbook being built
            classification: Classifier result for the step's type
            reporter: Summary sink for this conversion

        Returns:
            FAS step dictionary

        Raises:
            ValueError: If the classification is KNOWN_SUPPORTED
        """
        if classification.kind is StepKind.TRIGGER_START:
            return self.create_referenced_start(step, playbook_uuid, classification, reporter)
        if classification.kind is StepKind.KNOWN_UNSUPPORTED:
            return self.create_set_variable(step, playbook_uuid, classification, reporter, unknown=False)
        if classification.kind is StepKind.UNKNOWN:
            return self.create_set_variable(step, playbook_uuid, classification, reporter, unknown=True)
        raise ValueError(f"Supported step type {classification.step_type} needs no fallback")

    def create_set_variable(
        self,
        step: Dict[str, Any],
        playbook_uuid: str,
        classification: StepClassification,
        reporter: ConversionReporter,
        unknown: bool = False
    ) -> Dict[str, Any]:
        """Replace an unsupported or unknown step with a Set Variable step."""
        step_type_id = classification.step_type
        if unknown:
            type_label = UNKNOWN_STEP_TYPE_LABEL
            prefix = 'UNKNOWN'
            description = (
                f"Unknown step type (UUID: {step_type_id}). This step type is not recognized by the converter. "
                f"Original configuration preserved in {FALLBACK_ARGUMENT_KEY} variable as JSON string. "
                f"Please verify if this step type is supported in FAS before importing."
            )
            note = (
                f"Original {type_label} step (UUID: {step_type_id}). This step type was unknown to the converter. "
                f"It may be a new FSR step type or a custom step. Verify support in FAS."
            )
        else:
            type_label = classification.label or 'Unknown'
            prefix = 'UNSUPPORTED'
            description = (
                f"Original step type: {type_label}. This step is not supported in FAS and has been converted "
                f"to a Set Variable step. Original configuration preserved in {FALLBACK_ARGUMENT_KEY} "
                f"variable as JSON string."
            )
            note = (
                f"Original {type_label} step. This step type is known to be unsupported in FAS. "
                f"Manual recreation required. All original fields preserved for reference."
            )

        reporter.record(ConversionItem(
            name=step.get('name'),
            uuid=step.get('uuid'),
            category=FallbackCategory.UNKNOWN if unknown else FallbackCategory.UNSUPPORTED,
            type_label=type_label,
            step_type=step_type_id
        ))

        return {
            'uuid': step.get('uuid') or self.id_factory.new_uuid(),
            'workflow': playbook_uuid,
            'name': f"{prefix}: {step.get('name') or type_label}",
            'description': description,
            'arguments': {
                FALLBACK_ARGUMENT_KEY: self.encode_original(step, note)
            },
            'status': clone(step.get('status') or None),
            'top': str(step.get('top') or 0),
            'left': str(step.get('left') or 0),
            'workflowgroup': clone(step.get('group') or None),
            'stepType': SET_VARIABLE_STEP_TYPE,
            '@type': 'WorkflowStep'
        }

    def create_referenced_start(
        self,
        step: Dict[str, Any],
        playbook_uuid: str,
        classification: StepClassification,
        reporter: ConversionReporter
    ) -> Dict[str, Any]:
        """Flatten an FSR trigger-start step into a FAS referenced start."""
        arguments = step.get('arguments') or {}
        if not isinstance(arguments, dict):
            arguments = {}
        start_type_name = classification.label or UNKNOWN_START_LABEL

        description = f"Converted from {start_type_name} step. "
        if arguments.get('resource') or arguments.get('resources'):
            resources = arguments.get('resources') or [arguments.get('resource')]
            description += (
                f"Original trigger was for resource(s): "
                f"{json.dumps(resources, separators=(',', ':'), ensure_ascii=False)}. "
            )
        if arguments.get('route'):
            description += f"Original route: {arguments['route']}. "
        if arguments.get('fieldbasedtrigger'):
            description += "Had field-based trigger conditions. "
        description += (
            "FAS requires referenced playbooks only - this playbook must be called by another playbook "
            f"or via API. Original configuration preserved in {ORIGINAL_START_ARGUMENT_KEY} as JSON string."
        )

        note = f"Original {start_type_name} step. All fields preserved for reference."

        reporter.record(ConversionItem(
            name=step.get('name'),
            uuid=step.get('uuid'),
            category=FallbackCategory.FLATTENED_TRIGGER,
            type_label=start_type_name,
            step_type=classification.step_type,
            note=f"{start_type_name} converted to referenced start"
        ))

        return {
            'uuid': step.get('uuid') or self.id_factory.new_uuid(),
            'workflow': playbook_uuid,
            'name': step.get('name') or 'Start',
            'description': description,
            'arguments': {
                '__triggerLimit': True,
                'step_variables': {
                    'input': {
                        'params': extract_input_param_names(arguments)
                    }
                },
                'triggerOnSource': True,
                'triggerOnReplicate': False,
                ORIGINAL_START_ARGUMENT_KEY: self.encode_original(step, note)
            },
            'status': clone(step.get('status') or None),
            'top': str(step.get('top') or 0),
            'left': str(step.get('left') or 0),
            'workflowgroup': clone(step.get('group') or None),
            'stepType': FAS_REFERENCED_START_STEP_TYPE,
            '@type': 'WorkflowStep'
        }

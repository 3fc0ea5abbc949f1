"""
FAS to FSR conversion.

Converts a ``playbook_collections`` export into a ``workflow_collections``
export: playbooks become workflows, ISO timestamps become epoch seconds,
bare identifiers become absolute API paths, and step positions are shifted
onto the visible FSR canvas.
"""

from typing import Any, Dict, List, Optional

from .common import default_bool, require_document_type, select_trigger_step
from ..config.models import CanvasConfig
from ..config.step_type_rules import strip_step_type
from ..utils.constants import (
    FAS_DOCUMENT_TYPE,
    FSR_COLLECTION_CONTEXT,
    FSR_COLLECTION_PATH,
    FSR_DEFAULT_PLAYBOOK_ORIGIN,
    FSR_DEFAULT_PRIORITY,
    FSR_DOCUMENT_TYPE,
    FSR_PEOPLE_PATH,
    FSR_STEP_PATH,
    FSR_STEP_TYPE_PATH,
)
from ..utils.identifiers import IdentifierFactory, extract_uuid, find_step_name
from ..utils.positions import canvas_offset, coerce_int
from ..utils.references import ReferenceConvention, clone, rewrite_step_references
from ..utils.timestamps import TimestampNormalizer
from ..utils.trace_logger import TraceLogger, VerbosityLevel

FORMAT_MISMATCH_MESSAGE = "Input must be a FAS playbook_collections export"


def simplify_connector_arguments(arguments: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce FAS connector arguments to the shape FSR connector steps use."""
    params = arguments.get('params')
    from_param = params.get('from') if isinstance(params, dict) else None
    return {
        'config': arguments.get('config') or '',
        'version': arguments.get('version') or '1.0.0',
        'from_str': arguments.get('from_str') or from_param or '',
        'connector': arguments['connector'],
        'step_variables': clone(arguments.get('step_variables') or []),
    }


def step_reference(step_ref: Any) -> Optional[str]:
    """Wrap a FAS step reference as an absolute FSR step path."""
    step_uuid = extract_uuid(step_ref)
    return f"{FSR_STEP_PATH}{step_uuid}" if step_uuid else None


class FASToFSRConverter:
    """Document mapper for the FAS → FSR direction."""

    def __init__(
        self,
        id_factory: Optional[IdentifierFactory] = None,
        timestamps: Optional[TimestampNormalizer] = None,
        canvas: Optional[CanvasConfig] = None,
        trace_logger: Optional[TraceLogger] = None
    ):
        self.id_factory = id_factory or IdentifierFactory()
        self.timestamps = timestamps or TimestampNormalizer()
        self.canvas = canvas or CanvasConfig()
        self.trace_logger = trace_logger

    def convert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Convert a FAS export to an FSR export.

        Args:
            document: Parsed ``playbook_collections`` document (not mutated)

        Returns:
            FSR document with ``data`` and ``exported_tags``

        Raises:
            FormatMismatchError: If the document is not a FAS export
        """
        collections = require_document_type(document, FAS_DOCUMENT_TYPE, FORMAT_MISMATCH_MESSAGE)

        if self.trace_logger:
            self.trace_logger.log_decision("Starting FAS to FSR conversion", {"collections": len(collections)})

        fsr = {
            'type': FSR_DOCUMENT_TYPE,
            'data': [],
            'exported_tags': []
        }

        for collection in collections:
            fsr_collection = self._convert_collection(collection)
            for playbook in collection.get('playbooks') or []:
                fsr_collection['workflows'].append(self._convert_playbook(playbook, fsr_collection))
            fsr['data'].append(fsr_collection)

        return fsr

    def _convert_collection(self, collection: Dict[str, Any]) -> Dict[str, Any]:
        imported_by = collection.get('importedBy')
        return {
            '@context': FSR_COLLECTION_CONTEXT,
            '@type': 'WorkflowCollection',
            'name': collection.get('name') or '',
            'description': clone(collection.get('description') or None),
            'visible': default_bool(collection, 'visible', True),
            'image': clone(collection.get('image') or None),
            'uuid': collection.get('uuid'),
            'id': self.id_factory.new_numeric_id(),
            'createDate': self.timestamps.to_epoch_seconds(collection.get('createDate')),
            'modifyDate': self.timestamps.to_epoch_seconds(collection.get('modifyDate')),
            'deletedAt': clone(collection.get('deletedAt') or None),
            'importedBy': clone(imported_by) if isinstance(imported_by, list) else [],
            'recordTags': clone(collection.get('tags') or []),
            'workflows': []
        }

    def _person(self, user_ref: Any) -> str:
        return f"{FSR_PEOPLE_PATH}{extract_uuid(user_ref) or self.id_factory.new_uuid()}"

    def _convert_playbook(self, playbook: Dict[str, Any], fsr_collection: Dict[str, Any]) -> Dict[str, Any]:
        workflow_uuid = playbook.get('uuid') or self.id_factory.new_uuid()
        source_steps = playbook.get('steps') or []
        top_offset, left_offset = canvas_offset(source_steps, self.canvas.min_top, self.canvas.min_left)

        if self.trace_logger:
            self.trace_logger.log_decision(
                f"Canvas offset for '{playbook.get('name')}'",
                {"top_offset": top_offset, "left_offset": left_offset, "steps": len(source_steps)},
                VerbosityLevel.DETAILED
            )

        workflow = {
            '@type': 'Workflow',
            'triggerLimit': clone(playbook.get('triggerLimit') or None),
            'name': playbook.get('name') or '',
            'aliasName': clone(playbook.get('aliasName') or None),
            'tag': None,
            'description': clone(playbook.get('description') or None),
            'isActive': default_bool(playbook, 'isActive', True),
            'debug': default_bool(playbook, 'debug', False),
            'singleRecordExecution': default_bool(playbook, 'singleRecordExecution', False),
            'remoteExecutableFlag': default_bool(playbook, 'remoteExecutableFlag', False),
            'parameters': clone(playbook.get('parameters') or None),
            'synchronous': default_bool(playbook, 'synchronous', False),
            'lastModifyDate': clone(playbook.get('lastModifyDate')) or self.timestamps.now_epoch_seconds(),
            'collection': f"{FSR_COLLECTION_PATH}{fsr_collection['uuid']}",
            'versions': [],
            'triggerStep': None,
            'steps': [],
            'routes': [],
            'groups': clone(playbook.get('groups') or []),
            'priority': FSR_DEFAULT_PRIORITY,
            'playbookOrigin': FSR_DEFAULT_PLAYBOOK_ORIGIN,
            'isEditable': True,
            'uuid': workflow_uuid,
            'id': self.id_factory.new_numeric_id(),
            'createUser': self._person(playbook.get('createUser')),
            'createDate': self.timestamps.to_epoch_seconds(playbook.get('createDate')),
            'modifyUser': self._person(playbook.get('modifyUser')),
            'modifyDate': self.timestamps.to_epoch_seconds(playbook.get('modifyDate')),
            'owners': [],
            'isPrivate': default_bool(playbook, 'isPrivate', False),
            'deletedAt': clone(playbook.get('deletedAt') or None),
            'importedBy': [],
            'recordTags': clone(playbook.get('tags') or [])
        }

        for step in source_steps:
            workflow['steps'].append(self._convert_step(step, top_offset, left_offset))

        for route in playbook.get('routes') or []:
            workflow['routes'].append(self._convert_route(route, source_steps))

        workflow['triggerStep'] = self._resolve_trigger(playbook, workflow)
        return workflow

    def _convert_step(self, step: Dict[str, Any], top_offset: int, left_offset: int) -> Dict[str, Any]:
        arguments = rewrite_step_references(step.get('arguments') or {}, ReferenceConvention.ABSOLUTE)
        if isinstance(arguments, dict) and arguments.get('connector'):
            arguments = simplify_connector_arguments(arguments)

        return {
            '@type': 'WorkflowStep',
            'name': step.get('name') or '',
            'description': clone(step.get('description') or None),
            'arguments': arguments,
            'status': clone(step.get('status') or None),
            'top': str(coerce_int(step.get('top')) + top_offset),
            'left': str(coerce_int(step.get('left')) + left_offset),
            'stepType': f"{FSR_STEP_TYPE_PATH}{strip_step_type(step.get('stepType'))}",
            'group': clone(step.get('workflowgroup') or None),
            'uuid': step.get('uuid') or self.id_factory.new_uuid()
        }

    def _convert_route(self, route: Dict[str, Any], source_steps: List[Dict[str, Any]]) -> Dict[str, Any]:
        data = route.get('data')
        name = route.get('name') or (
            f"{find_step_name(route.get('sourcestep'), source_steps)}->"
            f"{find_step_name(route.get('targetstep'), source_steps)}"
        )
        return {
            '@type': 'WorkflowRoute',
            'name': name,
            'targetStep': step_reference(route.get('targetstep')),
            'sourceStep': step_reference(route.get('sourcestep')),
            'label': clone((data.get('label') if isinstance(data, dict) else None) or None),
            'isExecuted': default_bool(route, 'isExecuted', False),
            'group': clone(route.get('workflowgroup') or None),
            'uuid': route.get('uuid') or self.id_factory.new_uuid()
        }

    def _resolve_trigger(self, playbook: Dict[str, Any], workflow: Dict[str, Any]) -> Optional[str]:
        if playbook.get('triggerstep'):
            return step_reference(playbook['triggerstep'])

        trigger = select_trigger_step(workflow['steps'])
        if self.trace_logger:
            self.trace_logger.log_reasoning(
                "No explicit trigger step; selected by name heuristic",
                {"workflow": workflow['name'], "trigger": trigger.get('name') if trigger else None}
            )
        return step_reference(trigger['uuid']) if trigger else None

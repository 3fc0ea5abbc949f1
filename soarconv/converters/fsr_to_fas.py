"""
FSR to FAS conversion.

Converts a ``workflow_collections`` export into a ``playbook_collections``
export: workflows become playbooks, epoch timestamps become ISO strings,
absolute API references become bare identifiers, steps FAS cannot run are
fallback-encoded, and one version snapshot is produced per playbook.
"""

from typing import Any, Dict, List, Optional

from .common import default_bool, require_document_type, select_trigger_step
from ..config.step_type_rules import StepKind, StepTypeClassifier
from ..generators.fallback_factory import FallbackStepFactory
from ..generators.version_factory import VersionSnapshotFactory
from ..utils.constants import (
    FAS_COLLECTION_ID_TEMPLATE,
    FAS_DOCUMENT_TYPE,
    FAS_PLAYBOOK_ID_TEMPLATE,
    FAS_ROUTE_ID_TEMPLATE,
    FSR_DOCUMENT_TYPE,
)
from ..utils.conversion_summary import ConversionReporter
from ..utils.identifiers import IdentifierFactory, extract_uuid, find_step_name, resolve_priority
from ..utils.references import ReferenceConvention, clone, rewrite_step_references
from ..utils.timestamps import TimestampNormalizer
from ..utils.trace_logger import TraceLogger, VerbosityLevel

FORMAT_MISMATCH_MESSAGE = "Input must be an FSR workflow_collections export"

# Collection fields embedded into each playbook's ``collection`` object
EMBEDDED_COLLECTION_FIELDS = [
    '@id', 'uuid', 'createDate', 'modifyDate', 'deletedAt', 'name', 'description',
    'visible', 'image', 'importedBy', 'createUser', 'modifyUser', 'tags', '@type',
]


def complete_connector_arguments(arguments: Dict[str, Any]) -> Dict[str, Any]:
    """Fill in the fields a FAS connector step requires; existing values win."""
    connector = arguments['connector']
    defaults = {
        'name': arguments.get('name') or str(connector).upper(),
        'config': arguments.get('config') or '',
        'params': arguments.get('params') or {},
        'version': arguments.get('version') or '1.0.0',
        'connector': connector,
        'operation': arguments.get('operation') or '',
    }
    return {**defaults, **arguments}


class FSRToFASConverter:
    """
    Document mapper for the FSR → FAS direction.

    A fresh ConversionReporter is created for every call to ``convert``.
    """

    def __init__(
        self,
        classifier: Optional[StepTypeClassifier] = None,
        id_factory: Optional[IdentifierFactory] = None,
        timestamps: Optional[TimestampNormalizer] = None,
        trace_logger: Optional[TraceLogger] = None
    ):
        self.classifier = classifier or StepTypeClassifier()
        self.id_factory = id_factory or IdentifierFactory()
        self.timestamps = timestamps or TimestampNormalizer()
        self.trace_logger = trace_logger
        self.fallback_factory = FallbackStepFactory(self.id_factory)
        self.version_factory = VersionSnapshotFactory(self.id_factory, self.timestamps)

    def convert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Convert an FSR export to a FAS export.

        Args:
            document: Parsed ``workflow_collections`` document (not mutated)

        Returns:
            FAS document with ``data``, ``versions`` and ``_conversionSummary``

        Raises:
            FormatMismatchError: If the document is not an FSR export
        """
        collections = require_document_type(document, FSR_DOCUMENT_TYPE, FORMAT_MISMATCH_MESSAGE)
        reporter = ConversionReporter()

        if self.trace_logger:
            self.trace_logger.log_decision("Starting FSR to FAS conversion", {"collections": len(collections)})

        fas = {
            'type': FAS_DOCUMENT_TYPE,
            'data': [],
            'versions': [],
        }

        for collection in collections:
            fas_collection = self._convert_collection(collection)

            for workflow in collection.get('workflows') or []:
                playbook = self._convert_workflow(workflow, fas_collection, reporter)
                fas_collection['playbooks'].append(playbook)
                fas['versions'].append(self.version_factory.create_version(playbook))

            fas['data'].append(fas_collection)

        fas['_conversionSummary'] = reporter.to_dict()

        if self.trace_logger:
            self.trace_logger.log_decision("Finished FSR to FAS conversion", {
                "playbooks": len(fas['versions']),
                "unsupported": reporter.total_unsupported,
                "unknown": reporter.total_unknown,
                "manual_starts": reporter.total_manual_starts,
            })

        return fas

    def _convert_collection(self, collection: Dict[str, Any]) -> Dict[str, Any]:
        collection_uuid = collection.get('uuid')
        return {
            '@id': FAS_COLLECTION_ID_TEMPLATE.format(uuid=collection_uuid),
            'uuid': collection_uuid,
            'createDate': self.timestamps.to_iso8601(collection.get('createDate')),
            'modifyDate': self.timestamps.to_iso8601(collection.get('modifyDate')),
            'deletedAt': clone(collection.get('deletedAt') or None),
            'name': collection.get('name') or '',
            'description': clone(collection.get('description') or None),
            'visible': default_bool(collection, 'visible', True),
            'image': clone(collection.get('image') or None),
            'importedBy': clone(collection.get('importedBy') or []),
            'createUser': self._user(collection.get('createUser')),
            'modifyUser': self._user(collection.get('modifyUser')),
            'tags': clone(collection.get('recordTags') or []),
            '@type': 'WorkflowCollection',
            'playbooks': []
        }

    def _user(self, user_ref: Any) -> Any:
        return extract_uuid(user_ref) if user_ref else self.id_factory.new_uuid()

    def _convert_workflow(
        self,
        workflow: Dict[str, Any],
        fas_collection: Dict[str, Any],
        reporter: ConversionReporter
    ) -> Dict[str, Any]:
        playbook_uuid = workflow.get('uuid') or self.id_factory.new_uuid()
        name = str(workflow.get('name') or '')
        if name.startswith('> '):
            name = name[2:]

        playbook = {
            '@id': FAS_PLAYBOOK_ID_TEMPLATE.format(uuid=playbook_uuid),
            'uuid': playbook_uuid,
            'name': name,
            'createDate': self.timestamps.to_iso8601(workflow.get('createDate')),
            'modifyDate': self.timestamps.to_iso8601(workflow.get('modifyDate')),
            'priority': resolve_priority(workflow.get('priority')),
            'triggerLimit': clone(workflow.get('triggerLimit') or None),
            'steps': [],
            'routes': [],
            'groups': clone(workflow.get('groups') or []),
            'aliasName': clone(workflow.get('aliasName') or None),
            'tags': clone(workflow.get('recordTags') or []),
            'description': clone(workflow.get('description') or None),
            'isActive': default_bool(workflow, 'isActive', False),
            'debug': default_bool(workflow, 'debug', False),
            'singleRecordExecution': default_bool(workflow, 'singleRecordExecution', False),
            'remoteExecutableFlag': default_bool(workflow, 'remoteExecutableFlag', False),
            'parameters': clone(workflow.get('parameters') or None),
            'synchronous': default_bool(workflow, 'synchronous', False),
            'isPrivate': default_bool(workflow, 'isPrivate', False),
            'pinned': default_bool(workflow, 'pinned', False),
            'lastModifyDate': clone(workflow.get('lastModifyDate')) or self.timestamps.now_epoch_seconds(),
            'deletedAt': clone(workflow.get('deletedAt') or None),
            'importedBy': clone(workflow.get('importedBy') or None),
            'collection': {key: clone(fas_collection[key]) for key in EMBEDDED_COLLECTION_FIELDS},
        }

        source_steps = workflow.get('steps') or []
        if self.trace_logger:
            self.trace_logger.log_source_data(f"Workflow '{playbook['name']}'", {
                "uuid": playbook_uuid,
                "steps": len(source_steps),
                "routes": len(workflow.get('routes') or []),
                "triggerStep": workflow.get('triggerStep'),
            }, VerbosityLevel.DEBUG)

        reporter.start_definition(playbook['name'], playbook_uuid)
        for step in source_steps:
            reporter.count_step()
            playbook['steps'].append(self._convert_step(step, playbook_uuid, reporter))
        reporter.finish_definition()

        for route in workflow.get('routes') or []:
            playbook['routes'].append(self._convert_route(route, playbook_uuid, source_steps))

        playbook['triggerstep'] = self._resolve_trigger(workflow, playbook)
        playbook['createUser'] = self._user(workflow.get('createUser'))
        playbook['modifyUser'] = self._user(workflow.get('modifyUser'))
        playbook['@type'] = 'Workflow'

        return playbook

    def _convert_step(
        self,
        step: Dict[str, Any],
        playbook_uuid: str,
        reporter: ConversionReporter
    ) -> Dict[str, Any]:
        classification = self.classifier.classify(step.get('stepType'))

        if self.trace_logger:
            self.trace_logger.log_decision(
                f"Classified step '{step.get('name')}'",
                {"step_type": classification.step_type, "kind": classification.kind.value, "label": classification.label},
                VerbosityLevel.DETAILED
            )

        if classification.kind is not StepKind.KNOWN_SUPPORTED:
            fas_step = self.fallback_factory.create(step, playbook_uuid, classification, reporter)
            if self.trace_logger:
                self.trace_logger.log_decision(
                    f"Fallback-encoded step '{step.get('name')}'",
                    {"kind": classification.kind.value, "original_type": classification.step_type,
                     "substitute_type": fas_step['stepType']}
                )
            return fas_step

        arguments = rewrite_step_references(step.get('arguments') or {}, ReferenceConvention.RELATIVE)
        if isinstance(arguments, dict) and arguments.get('connector'):
            arguments = complete_connector_arguments(arguments)

        return {
            'uuid': step.get('uuid') or self.id_factory.new_uuid(),
            'workflow': playbook_uuid,
            'name': step.get('name') or '',
            'description': clone(step.get('description') or None),
            'arguments': arguments,
            'status': clone(step.get('status') or None),
            'top': str(step.get('top') or 0),
            'left': str(step.get('left') or 0),
            'workflowgroup': clone(step.get('group') or None),
            'stepType': classification.step_type,
            '@type': 'WorkflowStep'
        }

    def _convert_route(
        self,
        route: Dict[str, Any],
        playbook_uuid: str,
        source_steps: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        route_uuid = route.get('uuid') or self.id_factory.new_uuid()
        name = route.get('name') or (
            f"{find_step_name(route.get('sourceStep'), source_steps)}->"
            f"{find_step_name(route.get('targetStep'), source_steps)}"
        )

        if 'label' in route:
            label = route['label']
        elif isinstance(route.get('data'), dict) and 'label' in route['data']:
            label = route['data']['label']
        else:
            label = ''

        return {
            '@id': FAS_ROUTE_ID_TEMPLATE.format(uuid=route_uuid),
            'uuid': route_uuid,
            'name': name,
            'data': {
                'label': clone(label)
            },
            'isExecuted': default_bool(route, 'isExecuted', False),
            'sourcestep': extract_uuid(route.get('sourceStep')),
            'targetstep': extract_uuid(route.get('targetStep')),
            'workflowgroup': clone(route.get('group') or None),
            'workflow': playbook_uuid,
            '@type': 'WorkflowRoute'
        }

    def _resolve_trigger(self, workflow: Dict[str, Any], playbook: Dict[str, Any]) -> Optional[str]:
        if workflow.get('triggerStep'):
            return extract_uuid(workflow['triggerStep'])

        trigger = select_trigger_step(playbook['steps'])
        if self.trace_logger:
            self.trace_logger.log_reasoning(
                "No explicit trigger step; selected by name heuristic",
                {"playbook": playbook['name'], "trigger": trigger.get('name') if trigger else None}
            )
        return trigger['uuid'] if trigger else None

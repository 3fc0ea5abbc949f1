"""
Version snapshot factory for FAS exports.

FAS manual upload requires a ``versions`` list next to the collections.
Each entry is a denormalised copy of one playbook: integer canvas
coordinates, a minimal route shape, parameters and trigger step. The
snapshot is taken once, right after the playbook is assembled.
"""

from typing import Any, Dict, Optional

from ..utils.constants import VERSION_SNAPSHOT_NAME, VERSION_SNAPSHOT_NOTE
from ..utils.identifiers import IdentifierFactory
from ..utils.positions import coerce_int
from ..utils.references import clone
from ..utils.timestamps import TimestampNormalizer


class VersionSnapshotFactory:
    """Factory for FAS version entries."""

    def __init__(
        self,
        id_factory: Optional[IdentifierFactory] = None,
        timestamps: Optional[TimestampNormalizer] = None
    ):
        self.id_factory = id_factory or IdentifierFactory()
        self.timestamps = timestamps or TimestampNormalizer()

    def create_version(self, playbook: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create the version entry for an assembled FAS playbook.

        Args:
            playbook: Converted FAS playbook

        Returns:
            Version dictionary for the top-level ``versions`` list
        """
        now = self.timestamps.now_iso8601()

        return {
            'uuid': self.id_factory.new_uuid(),
            'createDate': now,
            'modifyDate': now,
            'deletedAt': None,
            'name': VERSION_SNAPSHOT_NAME,
            'workflow_name': playbook.get('name'),
            'note': VERSION_SNAPSHOT_NOTE,
            'json': {
                'uuid': playbook.get('uuid'),
                'debug': playbook.get('debug'),
                'steps': [
                    {
                        'id': step.get('uuid'),
                        'top': coerce_int(step.get('top')),
                        'left': coerce_int(step.get('left')),
                        'name': step.get('name'),
                        'uuid': step.get('uuid'),
                        'group': step.get('workflowgroup'),
                        'stepType': step.get('stepType'),
                        'arguments': clone(step.get('arguments'))
                    }
                    for step in playbook.get('steps', [])
                ],
                'groups': clone(playbook.get('groups')),
                'routes': [
                    {
                        'data': clone(route.get('data')),
                        'name': route.get('name'),
                        'uuid': route.get('uuid'),
                        'sourcestep': route.get('sourcestep'),
                        'targetstep': route.get('targetstep')
                    }
                    for route in playbook.get('routes', [])
                ],
                'parameters': clone(playbook.get('parameters')),
                'triggerstep': playbook.get('triggerstep')
            },
            'draft': False,
            'published': True,
            'workflow': playbook.get('uuid'),
            'createUser': playbook.get('createUser'),
            'modifyUser': None
        }

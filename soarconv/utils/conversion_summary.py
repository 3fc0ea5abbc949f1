"""
Conversion summary aggregation for FSR to FAS conversions.

The ConversionReporter is created fresh for every conversion call. The
fallback encoder records one ConversionItem per substituted step and the
mapper groups the items by playbook. The result is emitted once as the
``_conversionSummary`` field of the FAS document.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class FallbackCategory(Enum):
    """Why a step was replaced by a fallback-encoded substitute."""
    UNSUPPORTED = 'unsupported'
    UNKNOWN = 'unknown'
    FLATTENED_TRIGGER = 'flattened-trigger'


@dataclass(frozen=True)
class ConversionItem:
    """One fallback-encoded step."""
    name: Optional[str]
    uuid: Optional[str]
    category: FallbackCategory
    type_label: str
    step_type: str = ''
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.category is FallbackCategory.FLATTENED_TRIGGER:
            return {'name': self.name, 'uuid': self.uuid, 'note': self.note}
        item = {
            'name': self.name,
            'type': self.type_label,
            'uuid': self.uuid,
            'category': self.category.value,
        }
        if self.category is FallbackCategory.UNKNOWN:
            item['stepTypeUuid'] = self.step_type
        return item


class ConversionReporter:
    """
    Aggregates fallback-encoded steps into the conversion summary.

    Usage per playbook: ``start_definition`` → ``record`` for each
    substituted step → ``finish_definition``.
    """

    def __init__(self):
        self.total_steps_processed = 0
        self.total_unsupported = 0
        self.total_unknown = 0
        self.total_manual_starts = 0
        self.unsupported_by_type: Dict[str, int] = {}
        self.unknown_step_types: Dict[str, Dict[str, Any]] = {}
        self.playbooks_with_unsupported: List[Dict[str, Any]] = []
        self.playbooks_with_unknown: List[Dict[str, Any]] = []
        self.playbooks_with_manual_starts: List[Dict[str, Any]] = []
        self._definition: Optional[Dict[str, Any]] = None
        self._pending: List[ConversionItem] = []

    def start_definition(self, name: str, uuid: str) -> None:
        if self._definition is not None:
            raise RuntimeError(f"Definition '{self._definition['name']}' is still open")
        self._definition = {'name': name, 'uuid': uuid}
        self._pending = []

    def count_step(self) -> None:
        self.total_steps_processed += 1

    def record(self, item: ConversionItem) -> None:
        if self._definition is None:
            raise RuntimeError("ConversionReporter.record() called outside a definition")
        self._pending.append(item)

    def finish_definition(self) -> None:
        """Fold the items recorded for the open playbook into the totals."""
        if self._definition is None:
            raise RuntimeError("No definition is open")

        name = self._definition['name']
        uuid = self._definition['uuid']
        unsupported = [i for i in self._pending if i.category is FallbackCategory.UNSUPPORTED]
        unknown = [i for i in self._pending if i.category is FallbackCategory.UNKNOWN]
        manual_starts = [i for i in self._pending if i.category is FallbackCategory.FLATTENED_TRIGGER]

        if unsupported:
            self.total_unsupported += len(unsupported)
            self.playbooks_with_unsupported.append({
                'name': name,
                'uuid': uuid,
                'unsupportedSteps': [i.to_dict() for i in unsupported]
            })
            for item in unsupported:
                self.unsupported_by_type[item.type_label] = self.unsupported_by_type.get(item.type_label, 0) + 1

        if unknown:
            self.total_unknown += len(unknown)
            self.playbooks_with_unknown.append({
                'name': name,
                'uuid': uuid,
                'unknownSteps': [i.to_dict() for i in unknown]
            })
            for item in unknown:
                entry = self.unknown_step_types.setdefault(f"UUID: {item.step_type}", {'count': 0, 'examples': []})
                entry['count'] += 1
                entry['examples'].append(item.name)

        if manual_starts:
            self.total_manual_starts += len(manual_starts)
            self.playbooks_with_manual_starts.append({
                'name': name,
                'uuid': uuid,
                'manualStarts': [i.to_dict() for i in manual_starts]
            })

        self._definition = None
        self._pending = []

    def to_dict(self) -> Dict[str, Any]:
        """Return the summary in the ``_conversionSummary`` wire shape."""
        return {
            'totalStepsProcessed': self.total_steps_processed,
            'totalUnsupportedSteps': self.total_unsupported,
            'totalUnknownSteps': self.total_unknown,
            'totalManualStartsConverted': self.total_manual_starts,
            'unsupportedByType': dict(self.unsupported_by_type),
            'unknownStepTypes': {
                key: {'count': value['count'], 'examples': list(value['examples'])}
                for key, value in self.unknown_step_types.items()
            },
            'playbooksWithUnsupported': list(self.playbooks_with_unsupported),
            'playbooksWithUnknown': list(self.playbooks_with_unknown),
            'playbooksWithManualStarts': list(self.playbooks_with_manual_starts),
        }

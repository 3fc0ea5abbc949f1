"""Pytest configuration and fixtures."""

import copy
from datetime import datetime, timezone

import pytest

from soarconv import SoarConverter
from soarconv.config.models import ConverterConfig
from soarconv.utils.identifiers import IdentifierFactory
from soarconv.utils.timestamps import TimestampNormalizer

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
FIXED_NOW_ISO = "2024-01-02T03:04:05.000Z"
FIXED_NOW_EPOCH = 1704164645

MANUAL_START = "f414d039-bb0d-4e59-9c39-a8f1e880b18a"
API_ENDPOINT_START = "df26c7a2-4166-4ca5-91e5-548e24c01b5f"
CREATE_RECORD = "2597053c-e718-44b4-8394-4d40fe26d357"
FIND_RECORD = "b593663d-7d13-40ce-a3a3-96dece928770"
SET_VARIABLE = "04d0cf46-b6a8-42c4-8683-60a7eaa69e8f"
DECISION = "12254cf5-5db7-4b1a-8cb1-3af081924b28"
MANUAL_INPUT = "fc04082a-d7dc-4299-96fb-6837b1baa0fe"
CONNECTOR = "0bfed618-0316-11e7-93ae-92361f002671"
REFERENCED_START = "b348f017-9a94-471f-87f8-ce88b6a7ad62"
UNKNOWN_TYPE = "deadbeef-0000-4000-8000-000000000001"


class SequentialIdentifierFactory(IdentifierFactory):
    """Deterministic identifiers: uuid-1, uuid-2, ... and 100, 101, ..."""

    def __init__(self):
        self.uuid_count = 0
        self.numeric_count = 0

    def new_uuid(self) -> str:
        self.uuid_count += 1
        return f"uuid-{self.uuid_count}"

    def new_numeric_id(self) -> int:
        self.numeric_count += 1
        return 99 + self.numeric_count


def fsr_step(uuid, name, step_type, arguments=None, top=100, left=200, **extra):
    step = {
        "@type": "WorkflowStep",
        "name": name,
        "description": None,
        "arguments": arguments if arguments is not None else {},
        "status": None,
        "top": str(top),
        "left": str(left),
        "stepType": f"/api/3/workflow_step_types/{step_type}",
        "group": None,
        "uuid": uuid,
    }
    step.update(extra)
    return step


def scribble(value):
    """Mutate every dict and list reachable from a converted document."""
    if isinstance(value, dict):
        for item in list(value.values()):
            scribble(item)
        value["__scribbled"] = True
    elif isinstance(value, list):
        for item in list(value):
            scribble(item)
        value.append("__scribbled")


def fas_step(uuid, name, step_type, arguments=None, top="10", left="100"):
    return {
        "uuid": uuid,
        "workflow": "pb-1",
        "name": name,
        "description": None,
        "arguments": arguments if arguments is not None else {},
        "status": None,
        "top": top,
        "left": left,
        "workflowgroup": None,
        "stepType": step_type,
        "@type": "WorkflowStep",
    }


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def id_factory():
    return SequentialIdentifierFactory()


@pytest.fixture
def timestamps(fixed_clock):
    return TimestampNormalizer(fixed_clock)


@pytest.fixture
def converter(id_factory, fixed_clock):
    return SoarConverter(ConverterConfig(), id_factory=id_factory, clock=fixed_clock)


@pytest.fixture
def fsr_document():
    """FSR export with 2 unsupported, 1 unknown and 1 trigger-start step."""
    steps = [
        fsr_step(
            "step-start", "Start", MANUAL_START,
            arguments={
                "route": "/api/triggers/1/incident",
                "resources": ["alerts"],
                "step_variables": {"input": {"params": {"alertId": "", "severity": ""}}},
            },
            top=30, left=300,
        ),
        fsr_step(
            "step-decide", "Is Critical", DECISION,
            arguments={
                "conditions": [
                    {"option": "Yes", "step_iri": "/api/3/workflow_steps/step-create"},
                    {"option": "No", "step_iri": "step-find", "default": True},
                ]
            },
            top=130, left=300,
        ),
        fsr_step(
            "step-create", "Create Incident", CREATE_RECORD,
            arguments={"resource": {"name": "{{vars.input.params.alertId}}"}},
            top=230, left=200, description="Creates the incident",
        ),
        fsr_step("step-find", "Find Alert", FIND_RECORD, arguments={"query": {"limit": 1}}, top=230, left=400),
        fsr_step("step-custom", "Custom Widget", UNKNOWN_TYPE, arguments={"widget": "x"}, top=330, left=300),
        fsr_step(
            "step-ask", "Ask Analyst", MANUAL_INPUT,
            arguments={"response_mapping": {"options": [
                {"option": "Close", "step_uuid": "step-find"},
                {"option": "Escalate", "step_uuid": "api/3/workflow_steps/step-create"},
            ]}},
            top=430, left=300,
        ),
        fsr_step(
            "step-conn", "Send Mail", CONNECTOR,
            arguments={"connector": "smtp", "operation": "send_email", "params": {"to": "soc@example.com"}},
            top=530, left=300,
        ),
    ]
    return {
        "type": "workflow_collections",
        "data": [
            {
                "@type": "WorkflowCollection",
                "uuid": "col-1",
                "name": "SOC Playbooks",
                "description": "Incident handling",
                "visible": True,
                "image": None,
                "createDate": 1700000000,
                "modifyDate": 1700000000500,
                "deletedAt": None,
                "importedBy": [],
                "recordTags": ["soc"],
                "createUser": "/api/3/people/user-1",
                "modifyUser": "/api/3/people/user-2",
                "workflows": [
                    {
                        "@type": "Workflow",
                        "uuid": "wf-1",
                        "name": "> Incident Response",
                        "description": "Handles incidents",
                        "isActive": True,
                        "debug": False,
                        "parameters": ["alertId"],
                        "priority": "/api/3/picklists/2b563c61-ae2c-41c0-a85a-c9709585e3f2",
                        "createDate": 1700000000,
                        "modifyDate": 1700000100,
                        "lastModifyDate": 1700000100,
                        "createUser": "/api/3/people/user-1",
                        "modifyUser": "/api/3/people/user-2",
                        "recordTags": ["ir"],
                        "triggerStep": "/api/3/workflow_steps/step-start",
                        "steps": steps,
                        "routes": [
                            {
                                "@type": "WorkflowRoute",
                                "uuid": "route-1",
                                "name": "Start -> Is Critical",
                                "label": None,
                                "isExecuted": False,
                                "group": None,
                                "sourceStep": "/api/3/workflow_steps/step-start",
                                "targetStep": "/api/3/workflow_steps/step-decide",
                            },
                            {
                                "@type": "WorkflowRoute",
                                "uuid": "route-2",
                                "label": "Yes",
                                "sourceStep": "/api/3/workflow_steps/step-decide",
                                "targetStep": "/api/3/workflow_steps/step-create",
                            },
                        ],
                    }
                ],
            }
        ],
        "exported_tags": [],
    }


@pytest.fixture
def fas_document():
    return {
        "type": "playbook_collections",
        "data": [
            {
                "@id": "/api/workflow/playbook-collections/col-9/",
                "uuid": "col-9",
                "name": "Cloud Playbooks",
                "description": None,
                "visible": True,
                "createDate": "2024-01-01T00:00:00.000Z",
                "modifyDate": "2024-01-01T12:00:00.500Z",
                "importedBy": [],
                "tags": ["cloud"],
                "playbooks": [
                    {
                        "uuid": "pb-1",
                        "name": "Enrich Alert",
                        "createDate": "2024-01-01T00:00:00.000Z",
                        "modifyDate": "2024-01-01T00:00:10.000Z",
                        "priority": "medium",
                        "isActive": False,
                        "createUser": "user-7",
                        "tags": ["enrich"],
                        "triggerstep": "pb-step-1",
                        "steps": [
                            fas_step("pb-step-1", "Referenced Start", REFERENCED_START, top="10", left="100"),
                            fas_step(
                                "pb-step-2", "Route", DECISION,
                                arguments={"conditions": [{"option": "Go", "step_iri": "pb-step-3"}]},
                                top="110", left="250",
                            ),
                            fas_step(
                                "pb-step-3", "Lookup", CONNECTOR,
                                arguments={
                                    "connector": "virustotal",
                                    "name": "VIRUSTOTAL",
                                    "params": {"from": "alerts"},
                                    "operation": "lookup",
                                    "config": "cfg-1",
                                },
                                top="210", left="400",
                            ),
                        ],
                        "routes": [
                            {
                                "uuid": "pb-route-1",
                                "name": "",
                                "data": {"label": "Go"},
                                "sourcestep": "pb-step-2",
                                "targetstep": "pb-step-3",
                            }
                        ],
                    }
                ],
            }
        ],
        "versions": [],
    }


@pytest.fixture
def pristine():
    """Deep copy helper for asserting inputs are not mutated."""
    return copy.deepcopy

"""Tests for FSR to FAS conversion."""

import pytest

from soarconv.converters.fsr_to_fas import FSRToFASConverter, complete_connector_arguments
from soarconv.generators.fallback_factory import decode_original_step
from soarconv.utils.exceptions import FormatMismatchError

from conftest import (
    CREATE_RECORD,
    DECISION,
    FIXED_NOW_ISO,
    REFERENCED_START,
    SET_VARIABLE,
    UNKNOWN_TYPE,
    fsr_step,
    scribble,
)


def _playbook(result):
    return result["data"][0]["playbooks"][0]


def _step(playbook, uuid):
    return next(step for step in playbook["steps"] if step["uuid"] == uuid)


def test_output_shape(converter, fsr_document):
    result = converter.fsr_to_fas(fsr_document)

    assert result["type"] == "playbook_collections"
    assert len(result["data"]) == 1
    assert len(result["versions"]) == 1
    assert "_conversionSummary" in result


def test_summary_accounting(converter, fsr_document):
    """2 unsupported, 1 unknown and 1 trigger-start step are each counted once."""
    summary = converter.fsr_to_fas(fsr_document)["_conversionSummary"]

    assert summary["totalStepsProcessed"] == 7
    assert summary["totalUnsupportedSteps"] == 2
    assert summary["totalUnknownSteps"] == 1
    assert summary["totalManualStartsConverted"] == 1
    assert summary["unsupportedByType"] == {"Create Record": 1, "Find Record": 1}
    assert summary["unknownStepTypes"] == {
        f"UUID: {UNKNOWN_TYPE}": {"count": 1, "examples": ["Custom Widget"]}
    }

    [unsupported] = summary["playbooksWithUnsupported"]
    assert unsupported["name"] == "Incident Response"
    assert unsupported["uuid"] == "wf-1"
    assert [s["name"] for s in unsupported["unsupportedSteps"]] == ["Create Incident", "Find Alert"]

    [unknown] = summary["playbooksWithUnknown"]
    assert unknown["unknownSteps"] == [{
        "name": "Custom Widget",
        "type": "Unknown Step Type",
        "uuid": "step-custom",
        "category": "unknown",
        "stepTypeUuid": UNKNOWN_TYPE,
    }]

    [manual] = summary["playbooksWithManualStarts"]
    assert manual["manualStarts"] == [{
        "name": "Start",
        "uuid": "step-start",
        "note": "Manual Start converted to referenced start",
    }]


def test_summary_is_fresh_per_call(converter, fsr_document):
    converter.fsr_to_fas(fsr_document)
    summary = converter.fsr_to_fas(fsr_document)["_conversionSummary"]

    assert summary["totalUnsupportedSteps"] == 2
    assert len(summary["playbooksWithUnsupported"]) == 1


def test_collection_mapping(converter, fsr_document):
    collection = converter.fsr_to_fas(fsr_document)["data"][0]

    assert collection["@id"] == "/api/workflow/playbook-collections/col-1/"
    assert collection["createDate"] == "2023-11-14T22:13:20.000Z"
    assert collection["modifyDate"] == "2023-11-14T22:13:20.500Z"
    assert collection["tags"] == ["soc"]
    assert collection["createUser"] == "user-1"
    assert collection["modifyUser"] == "user-2"
    assert collection["@type"] == "WorkflowCollection"


def test_playbook_mapping(converter, fsr_document):
    playbook = _playbook(converter.fsr_to_fas(fsr_document))

    assert playbook["@id"] == "/api/workflow/playbooks/wf-1/"
    assert playbook["name"] == "Incident Response"
    assert playbook["priority"] == "medium"
    assert playbook["isActive"] is True
    assert playbook["tags"] == ["ir"]
    assert playbook["triggerstep"] == "step-start"
    assert playbook["createUser"] == "user-1"
    assert playbook["@type"] == "Workflow"
    assert playbook["collection"]["uuid"] == "col-1"
    assert "playbooks" not in playbook["collection"]


def test_supported_steps_keep_type_and_get_relative_references(converter, fsr_document):
    playbook = _playbook(converter.fsr_to_fas(fsr_document))

    decision = _step(playbook, "step-decide")
    assert decision["stepType"] == DECISION
    assert decision["top"] == "130"
    assert decision["left"] == "300"
    assert [c["step_iri"] for c in decision["arguments"]["conditions"]] == [
        "api/3/workflow_steps/step-create",
        "api/3/workflow_steps/step-find",
    ]

    ask = _step(playbook, "step-ask")
    assert [o["step_uuid"] for o in ask["arguments"]["response_mapping"]["options"]] == [
        "api/3/workflow_steps/step-find",
        "api/3/workflow_steps/step-create",
    ]


def test_connector_arguments_are_completed(converter, fsr_document):
    connector = _step(_playbook(converter.fsr_to_fas(fsr_document)), "step-conn")

    assert connector["arguments"] == {
        "name": "SMTP",
        "config": "",
        "params": {"to": "soc@example.com"},
        "version": "1.0.0",
        "connector": "smtp",
        "operation": "send_email",
    }


def test_complete_connector_arguments_keeps_existing_values():
    arguments = complete_connector_arguments({"connector": "vt", "name": "VirusTotal", "version": "2.1.0"})

    assert arguments["name"] == "VirusTotal"
    assert arguments["version"] == "2.1.0"
    assert arguments["operation"] == ""


def test_unsupported_step_is_fallback_encoded(converter, fsr_document):
    original = fsr_document["data"][0]["workflows"][0]["steps"][2]
    step = _step(_playbook(converter.fsr_to_fas(fsr_document)), "step-create")

    assert step["name"] == "UNSUPPORTED: Create Incident"
    assert step["stepType"] == SET_VARIABLE
    assert list(step["arguments"]) == ["_tmp"]

    decoded = decode_original_step(step["arguments"]["_tmp"])
    for key in ("@type", "name", "description", "stepType", "arguments", "status", "top", "left", "group", "uuid"):
        assert decoded[key] == original[key]
    assert decoded["stepType"] == f"/api/3/workflow_step_types/{CREATE_RECORD}"


def test_unknown_step_is_fallback_encoded(converter, fsr_document):
    step = _step(_playbook(converter.fsr_to_fas(fsr_document)), "step-custom")

    assert step["name"] == "UNKNOWN: Custom Widget"
    assert UNKNOWN_TYPE in step["description"]
    assert decode_original_step(step["arguments"]["_tmp"])["arguments"] == {"widget": "x"}


def test_trigger_start_is_flattened(converter, fsr_document):
    step = _step(_playbook(converter.fsr_to_fas(fsr_document)), "step-start")

    assert step["name"] == "Start"
    assert step["stepType"] == REFERENCED_START
    assert step["arguments"]["step_variables"] == {"input": {"params": ["alertId", "severity"]}}
    assert step["arguments"]["__triggerLimit"] is True
    assert "Original route: /api/triggers/1/incident." in step["description"]
    assert '["alerts"]' in step["description"]
    assert decode_original_step(step["arguments"]["_originalStartStep"])["uuid"] == "step-start"


def test_routes(converter, fsr_document):
    playbook = _playbook(converter.fsr_to_fas(fsr_document))
    first, second = playbook["routes"]

    assert first["@id"] == "/api/workflow/playbook-routes/route-1/"
    assert first["sourcestep"] == "step-start"
    assert first["targetstep"] == "step-decide"
    assert first["data"] == {"label": None}
    assert first["workflow"] == "wf-1"
    assert second["name"] == "Is Critical->Create Incident"
    assert second["data"] == {"label": "Yes"}
    assert second["isExecuted"] is False


def test_trigger_resolved_by_name_when_not_explicit(converter):
    document = {
        "type": "workflow_collections",
        "data": [{
            "uuid": "col-1",
            "name": "C",
            "workflows": [{
                "uuid": "wf-2",
                "name": "Heuristic",
                "steps": [
                    fsr_step("s-1", "Foo", SET_VARIABLE),
                    fsr_step("s-2", "Start Here", SET_VARIABLE),
                    fsr_step("s-3", "Bar", SET_VARIABLE),
                ],
                "routes": [],
            }],
        }],
    }

    playbook = _playbook(converter.fsr_to_fas(document))

    assert playbook["triggerstep"] == "s-2"


def test_trigger_is_null_without_steps(converter):
    document = {"type": "workflow_collections", "data": [{"uuid": "c", "workflows": [{"uuid": "w", "steps": []}]}]}

    assert _playbook(converter.fsr_to_fas(document))["triggerstep"] is None


def test_version_snapshot(converter, fsr_document):
    result = converter.fsr_to_fas(fsr_document)
    playbook = _playbook(result)
    [version] = result["versions"]

    assert version["workflow"] == "wf-1"
    assert version["workflow_name"] == "Incident Response"
    assert version["createDate"] == FIXED_NOW_ISO
    assert version["json"]["triggerstep"] == "step-start"
    assert [s["uuid"] for s in version["json"]["steps"]] == [s["uuid"] for s in playbook["steps"]]
    assert version["json"]["steps"][1]["top"] == 130
    assert version["json"]["routes"][0] == {
        "data": {"label": None},
        "name": "Start -> Is Critical",
        "uuid": "route-1",
        "sourcestep": "step-start",
        "targetstep": "step-decide",
    }


def test_missing_fields_take_defaults(converter):
    document = {"type": "workflow_collections", "data": [{"uuid": "c", "workflows": [{"name": "Bare"}]}]}

    result = converter.fsr_to_fas(document)
    collection = result["data"][0]
    playbook = collection["playbooks"][0]

    assert collection["createDate"] == FIXED_NOW_ISO
    assert collection["visible"] is True
    assert collection["createUser"] == "uuid-1"
    assert playbook["uuid"] == "uuid-3"
    assert playbook["isActive"] is False
    assert playbook["priority"] == "medium"
    assert playbook["groups"] == []


def test_output_does_not_share_structures_with_input(converter, fsr_document, pristine):
    collection = fsr_document["data"][0]
    collection["image"] = {"path": "/images/soc.png"}
    workflow = collection["workflows"][0]
    workflow["priority"] = {"itemValue": "High"}
    workflow["triggerLimit"] = {"n": 1}
    workflow["aliasName"] = ["ir"]
    for step in workflow["steps"]:
        step["status"] = {"state": "ok"}
        step["group"] = {"name": "Enrichment"}
    workflow["routes"][1]["label"] = {"text": "Yes"}
    before = pristine(fsr_document)

    result = converter.fsr_to_fas(fsr_document)
    playbook = _playbook(result)
    assert playbook["priority"] == {"itemValue": "High"}
    assert playbook["priority"] is not workflow["priority"]
    scribble(result)

    assert fsr_document == before


def test_non_string_workflow_name(converter, fsr_document):
    fsr_document["data"][0]["workflows"][0]["name"] = 123

    assert _playbook(converter.fsr_to_fas(fsr_document))["name"] == "123"


def test_input_is_not_mutated(converter, fsr_document, pristine):
    before = pristine(fsr_document)

    converter.fsr_to_fas(fsr_document)

    assert fsr_document == before


@pytest.mark.parametrize("document", [
    {"type": "playbook_collections", "data": []},
    {"data": []},
    [],
    None,
])
def test_rejects_other_documents(document):
    with pytest.raises(FormatMismatchError, match="FSR workflow_collections"):
        FSRToFASConverter().convert(document)


def test_rejects_non_list_data():
    with pytest.raises(FormatMismatchError):
        FSRToFASConverter().convert({"type": "workflow_collections", "data": {"a": 1}})

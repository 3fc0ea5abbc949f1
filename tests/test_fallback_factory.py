"""Tests for fallback-encoded substitute steps."""

import pytest

from soarconv.config.step_type_rules import StepClassification, StepKind, StepTypeClassifier
from soarconv.generators.fallback_factory import (
    FallbackStepFactory,
    decode_original_step,
    extract_input_param_names,
)
from soarconv.utils.conversion_summary import ConversionReporter

from conftest import (
    API_ENDPOINT_START,
    CONNECTOR,
    FIND_RECORD,
    REFERENCED_START,
    SET_VARIABLE,
    UNKNOWN_TYPE,
    fsr_step,
)

PRESERVED = ("@type", "name", "description", "stepType", "arguments", "status", "top", "left", "group", "uuid")


@pytest.fixture
def reporter():
    reporter = ConversionReporter()
    reporter.start_definition("Playbook", "pb-1")
    return reporter


@pytest.fixture
def factory(id_factory):
    return FallbackStepFactory(id_factory)


def _create(factory, reporter, step):
    return factory.create(step, "pb-1", StepTypeClassifier().classify(step["stepType"]), reporter)


@pytest.mark.parametrize("step_type, key", [
    (FIND_RECORD, "_tmp"),
    (UNKNOWN_TYPE, "_tmp"),
    (API_ENDPOINT_START, "_originalStartStep"),
])
def test_round_trip_is_lossless(factory, reporter, step_type, key):
    original = fsr_step(
        "s-1", "Lookup ünïcode", step_type,
        arguments={"nested": {"list": [1, 2.5, None, True], "text": "line\nbreak"}},
        top=17, left="250", status="finished", group="grp-1", description="desc",
    )

    substitute = _create(factory, reporter, original)
    decoded = decode_original_step(substitute["arguments"][key])

    for field in PRESERVED:
        assert decoded[field] == original[field]
    assert decoded["_conversionNote"]


def test_absent_fields_stay_absent(factory, reporter):
    original = {"uuid": "s-2", "name": "Sparse", "stepType": FIND_RECORD}

    decoded = decode_original_step(_create(factory, reporter, original)["arguments"]["_tmp"])

    assert set(decoded) == {"uuid", "name", "stepType", "arguments", "_conversionNote"}
    assert decoded["arguments"] == {}


def test_null_arguments_decode_as_empty_object(factory, reporter):
    original = fsr_step("s-3", "Null Args", FIND_RECORD)
    original["arguments"] = None

    decoded = decode_original_step(_create(factory, reporter, original)["arguments"]["_tmp"])

    assert decoded["arguments"] == {}
    assert decoded["status"] is None


def test_unsupported_substitute(factory, reporter):
    step = _create(factory, reporter, fsr_step("s-1", "Find Alert", FIND_RECORD, top=40, left=60, group="g"))

    assert step["name"] == "UNSUPPORTED: Find Alert"
    assert step["stepType"] == SET_VARIABLE
    assert step["workflow"] == "pb-1"
    assert step["top"] == "40"
    assert step["left"] == "60"
    assert step["workflowgroup"] == "g"
    assert step["description"].startswith("Original step type: Find Record.")
    assert step["@type"] == "WorkflowStep"


def test_unknown_substitute_uses_type_label_when_unnamed(factory, reporter):
    original = fsr_step("s-1", "", UNKNOWN_TYPE)

    step = _create(factory, reporter, original)

    assert step["name"] == "UNKNOWN: Unknown Step Type"
    assert f"UUID: {UNKNOWN_TYPE}" in step["description"]


def test_flattened_trigger(factory, reporter):
    original = fsr_step(
        "s-1", None, API_ENDPOINT_START,
        arguments={
            "route": "/api/triggers/1/lookup",
            "fieldbasedtrigger": {"filters": []},
            "step_variables": {"input": {"params": ["ip", {"name": "host"}, {"type": "no-name"}]}},
        },
    )

    step = _create(factory, reporter, original)

    assert step["name"] == "Start"
    assert step["stepType"] == REFERENCED_START
    assert step["arguments"]["step_variables"] == {"input": {"params": ["ip", "host"]}}
    assert step["arguments"]["triggerOnSource"] is True
    assert step["arguments"]["triggerOnReplicate"] is False
    assert step["description"].startswith("Converted from API Endpoint step. ")
    assert "Original route: /api/triggers/1/lookup." in step["description"]
    assert "Had field-based trigger conditions." in step["description"]
    assert "resource(s)" not in step["description"]


def test_each_substitute_is_reported_once(factory, reporter):
    _create(factory, reporter, fsr_step("a", "A", FIND_RECORD))
    _create(factory, reporter, fsr_step("b", "B", UNKNOWN_TYPE))
    _create(factory, reporter, fsr_step("c", "C", API_ENDPOINT_START))
    reporter.finish_definition()

    summary = reporter.to_dict()
    assert summary["totalUnsupportedSteps"] == 1
    assert summary["totalUnknownSteps"] == 1
    assert summary["totalManualStartsConverted"] == 1


def test_supported_steps_have_no_fallback(factory, reporter):
    classification = StepClassification(StepKind.KNOWN_SUPPORTED, CONNECTOR, "Connector")

    with pytest.raises(ValueError):
        factory.create(fsr_step("s", "S", CONNECTOR), "pb-1", classification, reporter)


def test_missing_uuid_is_generated(factory, reporter):
    step = _create(factory, reporter, {"name": "No id", "stepType": FIND_RECORD})

    assert step["uuid"] == "uuid-1"


@pytest.mark.parametrize("arguments, expected", [
    ({"step_variables": {"input": {"params": {"a": "", "b": ""}}}}, ["a", "b"]),
    ({"step_variables": {"input": {"params": ["a", {"name": "b"}]}}}, ["a", "b"]),
    ({"step_variables": {"input": {}}}, []),
    ({"step_variables": []}, []),
    ({}, []),
])
def test_extract_input_param_names(arguments, expected):
    assert extract_input_param_names(arguments) == expected

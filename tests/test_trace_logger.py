"""Tests for the conversion trace logger."""

import pytest

from soarconv import SoarConverter
from soarconv.config.models import ConverterConfig, TraceLogConfig
from soarconv.converters.converter import build_trace_logger
from soarconv.utils.trace_logger import TraceLogger, VerbosityLevel


def test_verbosity_from_string():
    assert VerbosityLevel.from_string("Detailed") is VerbosityLevel.DETAILED

    with pytest.raises(ValueError):
        VerbosityLevel.from_string("chatty")


def test_entries_above_verbosity_are_dropped():
    logger = TraceLogger(verbosity=VerbosityLevel.NORMAL)

    logger.log_decision("kept")
    logger.log_decision("dropped", verbosity_required=VerbosityLevel.DEBUG)
    logger.log_reasoning("dropped too")

    assert [e["decision"] for e in logger.entries_of("decision")] == ["kept"]
    assert logger.entries_of("reasoning") == []


def test_disabled_logger_records_nothing(tmp_path):
    logger = TraceLogger(enabled=False, output_directory=tmp_path)
    logger.log_decision("ignored")

    assert logger.entries == []
    assert logger.write_log("in.json", "out.json") is None


def test_write_log(tmp_path):
    logger = TraceLogger(verbosity=VerbosityLevel.DEBUG, output_directory=tmp_path / "logs")
    logger.log_decision("Classified step", {"kind": "unknown"})
    logger.log_source_data("Workflow", {"steps": 2})
    logger.log_reasoning("Picked trigger by name", {"trigger": "Start"})

    path = logger.write_log("exports/input.json", "output.json")

    text = path.read_text(encoding="utf-8")
    assert path.parent == tmp_path / "logs"
    assert path.name.startswith("input_")
    assert "# Trace Log: input.json → output.json" in text
    assert "### 1. Classified step" in text
    assert "  - kind: `unknown`" in text
    assert '"steps": 2' in text
    assert "- **Reasoning entries**: 1" in text


def test_build_trace_logger():
    assert build_trace_logger(None) is None
    assert build_trace_logger(TraceLogConfig(enabled=False)) is None

    logger = build_trace_logger(TraceLogConfig(enabled=True, verbosity="detailed", output_directory="x"))
    assert logger.verbosity is VerbosityLevel.DETAILED


def test_conversion_decisions_are_traced(fsr_document, fas_document, id_factory, fixed_clock):
    logger = TraceLogger(verbosity=VerbosityLevel.DEBUG)
    converter = SoarConverter(ConverterConfig(), id_factory=id_factory, clock=fixed_clock, trace_logger=logger)

    converter.fsr_to_fas(fsr_document)
    converter.fas_to_fsr(fas_document)

    decisions = [e["decision"] for e in logger.entries_of("decision")]
    assert "Starting FSR to FAS conversion" in decisions
    assert "Fallback-encoded step 'Create Incident'" in decisions
    assert "Canvas offset for 'Enrich Alert'" in decisions
    finished = next(e for e in logger.entries_of("decision") if e["decision"] == "Finished FSR to FAS conversion")
    assert finished["context"]["unsupported"] == 2
    assert logger.entries_of("source_data")


def test_render_skips_empty_sections():
    logger = TraceLogger()
    logger.log_decision("Only decision")

    report = logger.render("in.json", "out.json")

    assert "## Decisions" in report
    assert "## Source Data" not in report
    assert "## Reasoning" not in report
    assert "- **Decisions logged**: 1" in report

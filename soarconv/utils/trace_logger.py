"""
Trace Logger Utility for the SOAR playbook converter

Records the decisions taken while converting a document: how each step was
classified, which steps were fallback-encoded, which trigger step was chosen
and which canvas offsets were applied. Entries are buffered in memory and
rendered as a Markdown report on request.
"""

import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class VerbosityLevel(Enum):
    """Verbosity levels for trace logging."""
    MINIMAL = 1
    NORMAL = 2
    DETAILED = 3
    DEBUG = 4

    @classmethod
    def from_string(cls, level: str) -> 'VerbosityLevel':
        """Look up a level by name, case-insensitively.

        Raises:
            ValueError: If level string is not recognized
        """
        try:
            return cls[level.upper()]
        except KeyError:
            names = [member.name.lower() for member in cls]
            raise ValueError(f"Unknown verbosity level: {level}. Must be one of: {names}") from None


# Report sections: (entry type, heading, key holding the entry title)
REPORT_SECTIONS = [
    ('decision', 'Decisions', 'decision'),
    ('source_data', 'Source Data', 'source_type'),
    ('reasoning', 'Reasoning', 'reasoning'),
]

SUMMARY_LABELS = {
    'decision': 'Decisions logged',
    'source_data': 'Source data entries',
    'reasoning': 'Reasoning entries',
}


class TraceLogger:
    """
    Buffers conversion trace entries and writes them as Markdown.

    Entries above the configured verbosity are dropped when recorded, so a
    disabled or quiet logger costs almost nothing during conversion.
    """

    def __init__(
        self,
        enabled: bool = True,
        verbosity: VerbosityLevel = VerbosityLevel.NORMAL,
        output_directory: Path = Path("trace_logs"),
        log_file_name: Optional[str] = None
    ):
        self.enabled = enabled
        self.verbosity = verbosity
        self.output_directory = Path(output_directory)
        self.log_file_name = log_file_name
        self.entries: List[Dict[str, Any]] = []
        self.start_time = datetime.now()

    def _record(self, entry_type: str, verbosity_required: VerbosityLevel, **fields: Any) -> None:
        if not self.enabled or verbosity_required.value > self.verbosity.value:
            return
        entry = {
            'type': entry_type,
            'timestamp': datetime.now().isoformat(),
            'verbosity': verbosity_required.name,
        }
        entry.update(fields)
        self.entries.append(entry)

    def log_decision(
        self,
        decision: str,
        context: Optional[Dict[str, Any]] = None,
        verbosity_required: VerbosityLevel = VerbosityLevel.NORMAL
    ) -> None:
        """Record a mapping decision, e.g. a step classification or fallback."""
        self._record('decision', verbosity_required, decision=decision, context=context or {})

    def log_source_data(
        self,
        source_type: str,
        source_data: Any,
        verbosity_required: VerbosityLevel = VerbosityLevel.DETAILED
    ) -> None:
        """Record the source values a decision was based on."""
        self._record('source_data', verbosity_required, source_type=source_type, data=source_data)

    def log_reasoning(
        self,
        reasoning: str,
        context: Optional[Dict[str, Any]] = None,
        verbosity_required: VerbosityLevel = VerbosityLevel.DETAILED
    ) -> None:
        """Record why a heuristic picked what it picked."""
        self._record('reasoning', verbosity_required, reasoning=reasoning, context=context or {})

    def entries_of(self, entry_type: str) -> List[Dict[str, Any]]:
        return [e for e in self.entries if e['type'] == entry_type]

    def write_log(self, source_file: str, output_file: str) -> Optional[Path]:
        """Write the buffered entries to a Markdown file.

        Args:
            source_file: Path (or label) of the converted input document
            output_file: Path (or label) of the produced document

        Returns:
            Path to the written log file, or None if logging is disabled
        """
        if not self.enabled:
            return None

        self.output_directory.mkdir(parents=True, exist_ok=True)
        filename = self.log_file_name or f"{Path(source_file).stem}_{datetime.now():%Y%m%d_%H%M%S}.md"
        log_path = self.output_directory / filename
        log_path.write_text(self.render(source_file, output_file), encoding='utf-8')
        return log_path

    def render(self, source_file: str, output_file: str) -> str:
        """Render the buffered entries as a Markdown report."""
        lines = [
            f"# Trace Log: {Path(source_file).name} → {Path(output_file).name}",
            "",
            f"**Generated**: {datetime.now().isoformat()}",
            f"**Start Time**: {self.start_time.isoformat()}",
            f"**Verbosity Level**: {self.verbosity.name}",
            f"**Total Entries**: {len(self.entries)}",
            "",
            "---",
            "",
        ]

        for entry_type, heading, title_key in REPORT_SECTIONS:
            section = self.entries_of(entry_type)
            if not section:
                continue
            lines.extend([f"## {heading}", ""])
            for index, entry in enumerate(section, 1):
                lines.append(f"### {index}. {entry[title_key]}")
                lines.append(f"- **Time**: {entry['timestamp']} ({entry['verbosity']})")
                lines.extend(_render_payload(entry))
                lines.append("")

        lines.extend(["---", "", "## Summary", ""])
        for entry_type, label in SUMMARY_LABELS.items():
            lines.append(f"- **{label}**: {len(self.entries_of(entry_type))}")

        return "\n".join(lines)


def _render_payload(entry: Dict[str, Any]) -> List[str]:
    if 'data' in entry:
        return ["```json", json.dumps(entry['data'], indent=2, default=str), "```"]
    return [f"  - {key}: `{value}`" for key, value in entry['context'].items()]

#!/usr/bin/env python3
"""
SOAR Playbook Converter - command line entry point
==================================================

Converts FSR ``workflow_collections`` exports to FAS ``playbook_collections``
exports and back.

Usage:
    soarconv <input_file> [output_file] [--direction DIRECTION] [--config PATH]
    soarconv --detect <input_file>

Arguments:
    input_file: Path to the JSON export to convert
    output_file: Path for the converted JSON (default: {FAS|FSR}_Playbook_{date}.json)

Examples:
    # Auto-detect the direction
    soarconv export.json

    # Force a direction and name the output
    soarconv export.json fas.json --direction fsr-to-fas

    # Only report what the file contains
    soarconv --detect export.json --json
"""

import sys
import json
import argparse
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config.loader import ConfigLoader
from .config.models import OutputConfig
from .converters.converter import DIRECTION_AUTO, SoarConverter, parse_document
from .converters.detection import FormatDetection, detect_format, document_stats
from .utils.constants import DIRECTION_FSR_TO_FAS, DIRECTIONS
from .utils.exceptions import ConfigurationError, FormatMismatchError, InvalidDocumentError
from .version import get_version_string


def create_argument_parser():
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog='soarconv',
        description="SOAR Playbook Converter - FSR workflow_collections <-> FAS playbook_collections",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s export.json                              # Auto-detect direction
  %(prog)s export.json fas.json -d fsr-to-fas       # Explicit direction
  %(prog)s --detect export.json                     # Detect format only
        """
    )

    parser.add_argument(
        'input_file',
        help='Path to the JSON export to convert'
    )

    parser.add_argument(
        'output_file',
        nargs='?',
        default=None,
        help='Path for the converted JSON (default: {FAS|FSR}_Playbook_{date}.json)'
    )

    parser.add_argument(
        '-d', '--direction',
        choices=[DIRECTION_AUTO] + DIRECTIONS,
        default=DIRECTION_AUTO,
        help='Conversion direction (default: auto)'
    )

    parser.add_argument(
        '-c', '--config',
        default=None,
        help='Path to configuration file (default: soarconv_config.json when present)'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=get_version_string()
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    parser.add_argument(
        '--detect',
        action='store_true',
        help='Detect the export format and show counts without converting'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Output detection results as JSON (use with --detect)'
    )

    return parser


def default_output_name(direction: str, output_config: OutputConfig, today: Optional[date] = None) -> str:
    """Build the default output file name for a conversion direction."""
    prefix = 'FAS' if direction == DIRECTION_FSR_TO_FAS else 'FSR'
    if not output_config.include_date:
        return f"{prefix}_Playbook.json"
    return f"{prefix}_Playbook_{(today or date.today()).isoformat()}.json"


def print_detection(detection: FormatDetection) -> None:
    """Print format detection results in a formatted way."""
    print()
    print("=" * 60)
    print("  EXPORT FORMAT DETECTION")
    print("=" * 60)
    print()

    if detection.format == 'fsr':
        print("  Format:        FSR (workflow_collections)")
        print(f"  Collections:   {detection.collections}")
        print(f"  Workflows:     {detection.items}")
    else:
        print("  Format:        FAS (playbook_collections)")
        print(f"  Collections:   {detection.collections}")
        print(f"  Playbooks:     {detection.items}")
        print(f"  Versions:      {'present' if detection.has_versions else 'missing'}")
    print(f"  Direction:     {detection.suggested_direction}")
    print()
    print("=" * 60)


def print_conversion_report(result: Dict[str, Any], direction: str) -> None:
    """Print document counts and, for FSR → FAS, the conversion summary."""
    stats = document_stats(result, direction)
    label = 'Playbooks' if direction == DIRECTION_FSR_TO_FAS else 'Workflows'
    print(f"   Collections: {stats['collections']}")
    print(f"   {label}: {stats['definitions']}")
    print(f"   Steps: {stats['steps']}")
    print(f"   Routes: {stats['routes']}")

    summary = result.get('_conversionSummary')
    if not summary:
        return

    if summary['totalManualStartsConverted']:
        print(f"   ℹ️  {summary['totalManualStartsConverted']} FSR start step(s) converted to referenced start")
        for playbook in summary['playbooksWithManualStarts']:
            print(f"      📋 {playbook['name']}")
            _print_step_names(playbook['manualStarts'])

    if summary['totalUnknownSteps']:
        print(f"   🚨 {summary['totalUnknownSteps']} step(s) with unknown step types (prefixed UNKNOWN:)")
        for type_key, info in summary['unknownStepTypes'].items():
            examples = ', '.join(str(name) for name in info['examples'][:3])
            print(f"      {type_key}: {info['count']} step(s) - Examples: {examples}")

    if summary['totalUnsupportedSteps']:
        print(f"   ⚠️  {summary['totalUnsupportedSteps']} unsupported step(s) converted to Set Variable (prefixed UNSUPPORTED:)")
        for type_label, count in summary['unsupportedByType'].items():
            print(f"      {type_label}: {count} step(s)")


def _print_step_names(items: List[Dict[str, Any]]) -> None:
    for item in items:
        print(f"         - {item.get('name')}")


def read_input(input_file: str) -> Any:
    """
    Read and parse the input export.

    Raises:
        FileNotFoundError: If the input file does not exist
        InvalidDocumentError: If the file is not valid JSON
    """
    input_path = Path(input_file)
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_file}")
    return parse_document(input_path.read_text(encoding='utf-8'))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the soarconv command."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        document = read_input(args.input_file)

        # Handle detect mode
        if args.detect:
            detection = detect_format(document)
            if detection is None:
                print("⚠️  Format could not be detected")
                return 1
            if args.json:
                print(json.dumps(detection.to_dict(), indent=2))
            else:
                print_detection(detection)
            return 0

        config = ConfigLoader.load_or_default(args.config)
        converter = SoarConverter(config)
        direction = converter.resolve_direction(document, args.direction)
        output_file = args.output_file or default_output_name(direction, config.output)

        if args.verbose:
            print(f"🔧 {get_version_string()}")
            print(f"   Input File: {args.input_file}")
            print(f"   Output File: {output_file}")
            print(f"   Direction: {direction}")
            print()

        print(f"🔄 Converting {args.input_file} ({direction})...")
        result = converter.convert(document, direction)

        Path(output_file).write_text(
            json.dumps(result, indent=config.output.indent, ensure_ascii=False),
            encoding='utf-8'
        )

        print("✅ Conversion successful!")
        print(f"   Generated: {output_file}")
        print_conversion_report(result, direction)

        if converter.trace_logger:
            log_path = converter.trace_logger.write_log(args.input_file, output_file)
            if log_path:
                print(f"   📝 Trace log written: {log_path}")

        return 0

    except FileNotFoundError as e:
        print(f"❌ File Error: {e}")
        return 1

    except ConfigurationError as e:
        print(f"❌ Configuration Error: {e}")
        return 1

    except InvalidDocumentError as e:
        print(f"❌ Input Error: {e}")
        return 1

    except FormatMismatchError as e:
        print(f"❌ Conversion error: {e}")
        return 1

    except KeyboardInterrupt:
        print("\n⚠️  Conversion interrupted by user")
        return 130

    except Exception as e:
        print(f"❌ Unexpected Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())

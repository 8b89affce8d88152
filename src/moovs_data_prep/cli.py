#!/usr/bin/env python3
"""
CLI for Moovs data prep

This provides a command-line interface for:
- Converting LimoAnywhere contact exports into Moovs contact CSVs
- Converting reservation exports, optionally resolving contacts against
  a previously exported contacts file
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog

from .pipeline.import_session import ImportSession
from .schemas import SourceFormat, Workflow
from .utils.logging import configure_logging
from .validation.error_handler import DataPrepError

logger = structlog.get_logger(__name__)


def read_files(paths: Sequence[str]) -> List[Tuple[str, bytes]]:
    files = []
    for path in paths:
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"File {file_path} does not exist")
        files.append((file_path.name, file_path.read_bytes()))
    return files


def print_summary(session: ImportSession, verbose: bool = False) -> None:
    summary = session.summary()

    print(f"Workflow: {summary['workflow']}")
    print(f"Files: {summary['files']}")
    print("-" * 50)
    print(f"Rows in: {summary['input_rows']}")
    print(f"Dropped: {summary['dropped_rows']}")
    print(f"Merged: {summary['merged_rows']}")
    print(f"Records: {summary['records']}")
    print(f"Ready: {summary['ready']}")
    print(f"Placeholder phones issued: {summary['placeholder_phones']}")
    print(f"Duplicate groups: {summary['duplicate_groups']}")

    if summary['issues_by_type']:
        print("Issues:")
        for issue_type, count in sorted(summary['issues_by_type'].items()):
            print(f"  {issue_type}: {count}")

    lookup: Optional[Dict[str, Any]] = summary['lookup']
    if lookup:
        print(
            f"Contact lookup: {lookup['email_matches']} by email, "
            f"{lookup['name_matches']} by name, {lookup['no_matches']} not found"
        )

    if verbose:
        result = session.pipeline_result
        if result and result.dropped:
            print("\nDropped rows:")
            for dropped in result.dropped:
                print(f"  row {dropped.source_index + 1}: {dropped.reason}")
        if session.issues:
            print("\nIssues:")
            for issue in session.issues:
                suggestion = f" (suggested: {issue.suggested_value})" if issue.suggested_value else ""
                print(f"  row {issue.row_index + 1} {issue.field} [{issue.type.value}] {issue.message}{suggestion}")


def run_import(args, workflow: Workflow) -> int:
    """Load, transform, fix and export one workflow"""
    session = ImportSession(
        workflow,
        args.operator_id,
        base_phone=args.base_phone,
        pickup_address=getattr(args, 'pickup_address', None),
        dropoff_address=getattr(args, 'dropoff_address', None),
        source_format=SourceFormat(args.format) if args.format else None,
    )
    session.load_files(read_files(args.files))

    contacts_file = getattr(args, 'contacts', None)
    if contacts_file:
        name, data = read_files([contacts_file])[0]
        session.load_lookup_contacts(data, filename=name)

    session.process()
    if args.auto_fix:
        session.auto_fix()
    if args.keep_first_duplicates and session.duplicates:
        session.resolve_all_duplicates()

    print_summary(session, verbose=args.verbose)

    export = session.export()
    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / export.filename
    output_path.write_text(export.content, encoding='utf-8')
    print(f"\nWrote {export.row_count} rows to: {output_path}")
    return 0


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('files', nargs='+', help='CSV export file(s) with identical headers')
    parser.add_argument('--operator-id', required=True, help='Moovs operator ID stamped on every record')
    parser.add_argument('--base-phone', help='First placeholder phone number (default from settings)')
    parser.add_argument('--format', choices=[f.value for f in SourceFormat],
                        help='Source format (default: detect from headers)')
    parser.add_argument('--auto-fix', action='store_true', help='Apply every suggested fix')
    parser.add_argument('--keep-first-duplicates', action='store_true',
                        help='Resolve every duplicate group by keeping its first record')
    parser.add_argument('--output', '-o', default='.', help='Output directory (default: current directory)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')


def setup_parser():
    """Setup command line argument parser"""

    parser = argparse.ArgumentParser(
        prog='moovs-data-prep',
        description="Prepare LimoAnywhere exports for import into Moovs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s contacts customers.csv --operator-id op_123 --auto-fix
  %(prog)s reservations trips.csv --operator-id op_123 --contacts moovs-contacts.csv
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    contacts_parser = subparsers.add_parser('contacts', help='Prepare a contacts import')
    _add_common_arguments(contacts_parser)

    reservations_parser = subparsers.add_parser('reservations', help='Prepare a reservations import')
    _add_common_arguments(reservations_parser)
    reservations_parser.add_argument('--contacts', help='Previously exported contacts CSV for email/phone lookup')
    reservations_parser.add_argument('--pickup-address', help='Placeholder for missing pick up addresses')
    reservations_parser.add_argument('--dropoff-address', help='Placeholder for missing drop off addresses')

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI function"""

    parser = setup_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(level='DEBUG' if args.verbose else None)

    try:
        return run_import(args, Workflow(args.command))
    except DataPrepError as e:
        logger.error("Import failed", **e.to_dict())
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""fhircheck CLI: validate FHIR bundle files."""

import argparse
import logging
import os
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path
from typing import Optional

DEBUG_OUTPUT_ENV = "FHIRCHECK_DEBUG_OUTPUT"
LEVEL_CHOICES = ["debug", "info", "warning", "error", "fatal"]


def main():
    """Main CLI entry point for fhircheck commands."""
    # Get version for --version argument (handle PackageNotFoundError)
    try:
        fhircheck_version = get_version("fhircheck")
    except PackageNotFoundError:
        fhircheck_version = "dev"

    parser = argparse.ArgumentParser(
        prog="fhircheck",
        description="fhircheck: schema and house-rule validation for FHIR bundles"
    )
    parser.add_argument("--version", action="version", version=f"fhircheck {fhircheck_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parent_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging."
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # bundle command
    bundle_parser = subparsers.add_parser(
        "bundle",
        help="Validate a FHIR bundle JSON file",
        parents=[parent_parser]
    )
    bundle_parser.add_argument(
        "bundle_path",
        type=Path,
        help="Path to FHIR bundle JSON"
    )
    bundle_parser.add_argument(
        "--level",
        choices=LEVEL_CHOICES,
        default="warning",
        help="Lowest diagnostic severity to print"
    )
    bundle_parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Output directory for validate_bundle.json"
    )
    bundle_parser.add_argument(
        "--debug-output",
        type=Path,
        default=os.environ.get(DEBUG_OUTPUT_ENV) or None,
        help=f"Write the raw input text to this file (default: ${DEBUG_OUTPUT_ENV})"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    def _write_validation_result(result, output_dir: Optional[Path], filename: str) -> None:
        from ._internal.canonical_json import canonical_dumps

        status = "OK" if result.ok else "FAILED"
        if output_dir is not None:
            output_dir.mkdir(parents=True, exist_ok=True)
            report_out = output_dir / filename
            report_out.write_text(canonical_dumps(result.model_dump(mode="json")) + "\n", encoding="utf-8")
            if not args.quiet:
                print(f"[{status}] Validation complete")
                print(f"  Report: {report_out}")
        else:
            if not args.quiet:
                print(f"[{status}] Validation complete")
        if not args.quiet:
            print(f"  Status: {status}")
            print(f"  Errors: {len(result.errors)}")
            print(f"  Warnings: {len(result.warnings)}")
        if not result.ok:
            sys.exit(1)

    if args.command == "bundle":
        try:
            from .api import validate_file
            from .contracts import Severity
            from .kernel.log import format_diagnostics

            bundle_path = Path(args.bundle_path).resolve()
            output_dir = Path(args.output_dir).resolve() if args.output_dir else None
            debug_output = Path(args.debug_output).resolve() if args.debug_output else None

            result = validate_file(bundle_path, debug_output_path=debug_output)

            if not args.quiet:
                print(format_diagnostics(str(bundle_path), result.diagnostics, Severity(args.level)))
            _write_validation_result(result, output_dir, "validate_bundle.json")
        except FileNotFoundError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        except Exception as e:
            print(f"Unexpected error: {e}", file=sys.stderr)
            import traceback
            traceback.print_exc()
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

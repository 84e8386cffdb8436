#!/usr/bin/env python3
# run_monitor.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Command-line interface for LTL trace verification with configurable logging levels

import sys
import argparse
from pathlib import Path

from logic.check import CheckOutcome
from logic.runner import PropertyAndTraceVerifier, read_property_file
from model.snapshot import proposition_resolver
from parser import parse_specification
from parser.exceptions import ParseError
from runtime.registry import Registry
from utils.trace_reader import validate_trace_file, TraceFormatError
from utils.logger import LogLevel, get_logger

EXIT_OK = 0
EXIT_TRACE_ERROR = 1
EXIT_PARSE_ERROR = 2
EXIT_PROPERTY_FILE_ERROR = 3
EXIT_INTERRUPTED = 4
EXIT_UNEXPECTED = 5
EXIT_PROPERTY_FAILED = 6


def configure_logging_for_monitor(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging levels for the verifier.

    Final verdicts are reported at INFO, so INFO stays on without --verbose;
    --verbose additionally reports every snapshot.

    Args:
        verbose: Enable per-snapshot reporting
        debug: Enable DEBUG level logging (overrides verbose)
    """
    logger = get_logger()

    if debug:
        logger.set_level(LogLevel.DEBUG)
    else:
        logger.set_level(LogLevel.INFO)


def validate_properties(path: Path) -> int:
    """Parse a property file without running it.

    Returns:
        Number of properties in the file

    Raises:
        ParseError: If any property is malformed
        FileNotFoundError, ValueError: If the file cannot be read
    """
    text = read_property_file(path)
    return len(parse_specification(text, proposition_resolver(Registry())))


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser for command line interface.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Vigil LTL Runtime Verification",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_monitor.py -p properties.ltl -t trace.csv
  python run_monitor.py -p properties.ltl -t trace.csv -v
  python run_monitor.py -p properties.ltl -t trace.csv --debug
  python run_monitor.py -p properties.ltl -t trace.csv --validate-only
  python run_monitor.py -p properties.ltl -t trace.csv --tick-millis 100

Property file format:
  One named formula per line; '#' starts a comment.

  properties.ltl:
    # every request is acknowledged within two seconds
    acked: always(req -> eventually(ack).within(2, seconds))
    safe:  always(!(error & busy))

Trace file format:
  sid,time,props
  s1,0,req
  s2,1500,ack
        """,
    )

    parser.add_argument(
        "-p", "--property", required=True, type=Path, help="Path to property file"
    )

    parser.add_argument(
        "-t", "--trace", required=True, type=Path, help="Path to CSV trace file"
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Report verdicts after every snapshot"
    )

    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output (overrides --verbose)"
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Only validate property and trace file format",
    )

    parser.add_argument(
        "--stop-on-verdict",
        action="store_true",
        help="Stop processing once every property is decided",
    )

    parser.add_argument(
        "--tick-millis",
        type=float,
        default=1.0,
        help="Milliseconds between snapshots without a time column (default: 1.0)",
    )

    parser.add_argument(
        "--visualize",
        action="store_true",
        help="Render violation trees with graphviz",
    )

    return parser


def main(argv=None) -> int:
    """Main entry point for the verification application.

    Returns:
        Exit code (0 for success, non-zero for errors or failed properties)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    if args.tick_millis < 0:
        parser.error(f"--tick-millis must be non-negative, got {args.tick_millis}")
    logger = get_logger()

    try:
        configure_logging_for_monitor(verbose=args.verbose, debug=args.debug)

        if args.validate_only:
            count = validate_properties(args.property)
            logger.info(f"✅ {count} properties are well-formed")
            logger.info(f"🔍 Validating trace file: {args.trace}")
            validate_trace_file(str(args.trace))
            logger.info("✅ Trace validation successful. Exiting.")
            return EXIT_OK

        runner = PropertyAndTraceVerifier(
            str(args.property), str(args.trace), tick_millis=args.tick_millis
        )
        results = runner.run(
            stop_on_verdict=args.stop_on_verdict,
            verbose=args.verbose or args.debug,
            visualize=args.visualize,
        )

        failed = [n for n, r in results.items() if r.outcome is CheckOutcome.FAILED]
        if failed:
            logger.info(f"❌ Failed properties: {', '.join(failed)}")
            return EXIT_PROPERTY_FAILED
        return EXIT_OK

    except TraceFormatError as e:
        logger.error(f"Trace file error: {e}")
        return EXIT_TRACE_ERROR

    except ParseError as e:
        logger.error(f"Formula parsing error: {e}")
        return EXIT_PARSE_ERROR

    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Property file error: {e}")
        return EXIT_PROPERTY_FILE_ERROR

    except KeyboardInterrupt:
        logger.error("Verification interrupted by user")
        return EXIT_INTERRUPTED

    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        import traceback

        traceback.print_exc()
        return EXIT_UNEXPECTED


if __name__ == "__main__":
    sys.exit(main())

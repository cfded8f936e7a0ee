"""CLI entry point for Dual DB Sync.

Usage:
    python -m dual_db_sync run CONFIG SQL [SQL ...] [--json] [--strict]
    python -m dual_db_sync classify SQL
    python -m dual_db_sync check CONFIG

Commands:
    run       Synchronize one or more statements across primary and replica
    classify  Show how a statement would be dispatched
    check     Connect to both databases and run a health check

Exit codes:
    0  success
    1  configuration error
    2  connection error
    3  a statement failed (run --strict only)
"""

import argparse
import json
import logging
import sys
from typing import Optional

from dual_db_sync import __version__
from dual_db_sync.classifier import classify, clean_query, write_kind
from dual_db_sync.config import LoggingConfig, load_config
from dual_db_sync.errors import ConfigError, DatabaseConnectionError
from dual_db_sync.sync.coordinator import SyncCoordinator
from dual_db_sync.utils.hashing import statement_fingerprint
from dual_db_sync.utils.logging import configure_root_logger

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_CONNECTION_ERROR = 2
EXIT_STATEMENT_FAILED = 3


def setup_logging(args: argparse.Namespace, config: Optional[LoggingConfig] = None) -> None:
    """Configure logging from CLI flags, falling back to the config file."""
    config = config or LoggingConfig()
    level = logging.DEBUG if args.verbose else config.level
    configure_root_logger(
        level=level,
        json_output=args.json_logs or config.json_output,
        log_file=config.log_file,
    )


def _load(args: argparse.Namespace):
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None
    setup_logging(args, config.logging)
    return config


def cmd_run(args: argparse.Namespace) -> int:
    """Handle the 'run' command - synchronize statements.

    Args:
        args: Parsed CLI arguments

    Returns:
        Exit code
    """
    config = _load(args)
    if config is None:
        return EXIT_CONFIG_ERROR

    try:
        coordinator = SyncCoordinator.from_config(config)
    except DatabaseConnectionError as e:
        print(f"Failed to connect to {e.name} database: {e}", file=sys.stderr)
        return EXIT_CONNECTION_ERROR

    failed = 0
    with coordinator:
        outcomes = [coordinator.synchronize(sql) for sql in args.sql]

    for outcome in outcomes:
        if not outcome.success:
            failed += 1
        if args.json:
            continue
        stream = sys.stdout if outcome.success else sys.stderr
        print(outcome.message, file=stream)

    if args.json:
        print(json.dumps([o.to_dict() for o in outcomes], indent=2))

    diverged = coordinator.executor.get_diverged()
    if diverged:
        print(f"Warning: {len(diverged)} statement(s) diverged between primary and replica", file=sys.stderr)
        for record in diverged:
            print(f"  [{record.fingerprint}] {record.statement}", file=sys.stderr)

    if failed and args.strict:
        return EXIT_STATEMENT_FAILED
    return EXIT_OK


def cmd_classify(args: argparse.Namespace) -> int:
    """Handle the 'classify' command - show dispatch decision."""
    query_type = classify(args.sql)
    kind = write_kind(args.sql)
    info = {
        "query_type": query_type.value,
        "write_kind": kind.value if kind else None,
        "normalized": clean_query(args.sql),
        "fingerprint": statement_fingerprint(args.sql),
    }
    if args.json:
        print(json.dumps(info, indent=2))
    else:
        print(f"Type: {info['query_type']}")
        if kind:
            print(f"Write kind: {info['write_kind']}")
        print(f"Normalized: {info['normalized']}")
        print(f"Fingerprint: {info['fingerprint']}")
    return EXIT_OK


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the 'check' command - connect and health-check both stores."""
    config = _load(args)
    if config is None:
        return EXIT_CONFIG_ERROR

    try:
        coordinator = SyncCoordinator.from_config(config)
    except DatabaseConnectionError as e:
        print(f"Failed to connect to {e.name} database: {e}", file=sys.stderr)
        return EXIT_CONNECTION_ERROR

    coordinator.close()
    print("Connection to primary database successful.")
    print("Connection to replica database successful.")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="dual-db-sync",
        description="Dual DB Sync - dual writes and alternating reads across a primary and a replica",
    )
    parser.add_argument(
        "--version", action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable verbose output"
    )
    parser.add_argument(
        "--json-logs", action="store_true",
        help="Emit logs as JSON lines"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Synchronize SQL statements")
    run_parser.add_argument("config", help="Path to the INI config file")
    run_parser.add_argument("sql", nargs="+", help="SQL statement(s), run in order")
    run_parser.add_argument("--json", action="store_true", help="Print outcomes as JSON")
    run_parser.add_argument(
        "--strict", action="store_true",
        help="Exit non-zero if any statement fails"
    )

    classify_parser = subparsers.add_parser("classify", help="Classify a SQL statement")
    classify_parser.add_argument("sql", help="SQL statement")
    classify_parser.add_argument("--json", action="store_true", help="Output as JSON")

    check_parser = subparsers.add_parser("check", help="Check both database connections")
    check_parser.add_argument("config", help="Path to the INI config file")

    return parser


def main(argv=None) -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_OK

    setup_logging(args)

    commands = {
        "run": cmd_run,
        "classify": cmd_classify,
        "check": cmd_check,
    }
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())

"""
Command-line argument parser configuration.

Sets up the argument parser for the pgdump-sanitize tool, defining its
commands and their options.
"""

import argparse

from sanitization import __version__


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="pgdump-sanitize",
        description="Sanitize sensitive column values in PostgreSQL plain-text dumps",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sanitize a dump file to stdout
  pgdump-sanitize run --config policies.yaml dump.sql > sanitized.sql

  # Stream from pg_dump, deterministic replacements within the run
  pg_dump mydb | pgdump-sanitize run --config policies.yaml --strategy hash -

  # Stable replacements across runs (same pepper)
  PGDUMP_SANITIZER_PEPPER=... pgdump-sanitize run --config policies.yaml --strategy hash dump.sql

  # Check a policy file without processing a dump
  pgdump-sanitize validate --config policies.yaml
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )
    parser.add_argument(
        '--log-file',
        help='Also write logs to this file (rotated)'
    )
    parser.add_argument(
        '--log-json',
        action='store_true',
        help='Emit logs as JSON lines'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ========== Run command ==========
    run_parser = subparsers.add_parser('run', help='Sanitize a dump')
    run_parser.add_argument(
        'input',
        nargs='?',
        default='-',
        help='Dump file to read, "-" for stdin (default: stdin)'
    )
    run_parser.add_argument(
        '--config',
        required=True,
        help='Policy configuration file (YAML or JSON)'
    )
    run_parser.add_argument(
        '--output',
        help='Write the sanitized dump to this file instead of stdout'
    )
    run_parser.add_argument(
        '--strategy',
        choices=['random', 'hash'],
        help='Override the generation strategy from the configuration'
    )
    run_parser.add_argument(
        '--metrics-port',
        type=int,
        help='Expose Prometheus metrics on this port while running'
    )
    run_parser.add_argument(
        '--otlp-endpoint',
        help='Export trace spans to this OTLP collector (host:port)'
    )
    run_parser.add_argument(
        '--trace-console',
        action='store_true',
        help='Print trace spans to stderr'
    )

    # ========== Validate command ==========
    validate_parser = subparsers.add_parser(
        'validate', help='Validate a policy configuration file'
    )
    validate_parser.add_argument(
        '--config',
        required=True,
        help='Policy configuration file (YAML or JSON)'
    )

    return parser

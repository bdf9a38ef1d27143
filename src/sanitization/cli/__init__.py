"""
Command-line interface for dump sanitization.

Available commands:
- run: Sanitize a dump stream
- validate: Validate a policy configuration file
"""

import logging
import sys

from sanitization.errors import SanitizationError
from utils.logging import setup_logging, shutdown_logging

from .commands import cmd_run, cmd_validate
from .parser import create_parser

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the pgdump-sanitize CLI"""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(
        level=args.log_level,
        log_file=args.log_file,
        json_format=args.log_json,
    )

    try:
        if args.command == 'run':
            cmd_run(args)
        elif args.command == 'validate':
            cmd_validate(args)
        else:
            parser.print_help()
            sys.exit(1)
    except SanitizationError as e:
        logger.error(f"{type(e).__name__}: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Interrupted, output is incomplete")
        sys.exit(130)
    finally:
        shutdown_logging()


__all__ = [
    'main',
    'cmd_run',
    'cmd_validate',
    'create_parser',
]


if __name__ == '__main__':
    main()

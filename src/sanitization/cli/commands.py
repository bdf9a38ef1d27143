"""
CLI command implementations.

- run: sanitize one dump stream
- validate: check a policy configuration file
"""

import argparse
import io
import logging
import os
import sys
from contextlib import ExitStack
from typing import TextIO

from sanitization.config import load_policies
from sanitization.errors import ConfigurationError
from sanitization.policy import GenerationStrategy
from sanitization.scanner import DumpScanner
from transformation.transformers import KeyedHashGenerator
from transformation.transformers.rules import create_generator
from utils.metrics import initialize_metrics
from utils.tracing import initialize_tracing, shutdown_tracing

logger = logging.getLogger(__name__)

PEPPER_ENV_VAR = "PGDUMP_SANITIZER_PEPPER"
DUMP_ENCODING = "utf-8"
# Undecodable bytes must round-trip unchanged
DUMP_ERRORS = "surrogateescape"


def _configure_stream(stream: TextIO) -> TextIO:
    if isinstance(stream, io.TextIOWrapper):
        stream.reconfigure(encoding=DUMP_ENCODING, errors=DUMP_ERRORS, newline="")
    return stream


def open_input(path: str, stack: ExitStack) -> TextIO:
    if path == "-":
        return _configure_stream(sys.stdin)
    return stack.enter_context(
        open(path, encoding=DUMP_ENCODING, errors=DUMP_ERRORS, newline="")
    )


def open_output(path: str | None, stack: ExitStack) -> TextIO:
    if path is None:
        return _configure_stream(sys.stdout)
    return stack.enter_context(
        open(path, "w", encoding=DUMP_ENCODING, errors=DUMP_ERRORS, newline="")
    )


def get_pepper() -> bytes | None:
    """
    Read the keyed-hash pepper from the environment, if set.

    Raises:
        ConfigurationError: If the pepper is shorter than the generator accepts
    """
    pepper = os.getenv(PEPPER_ENV_VAR)
    if not pepper:
        return None

    encoded = pepper.encode("utf-8")
    if len(encoded) < KeyedHashGenerator.MIN_PEPPER_LENGTH:
        raise ConfigurationError(
            f"{PEPPER_ENV_VAR} must be at least "
            f"{KeyedHashGenerator.MIN_PEPPER_LENGTH} bytes long"
        )
    return encoded


def cmd_run(args: argparse.Namespace) -> None:
    """
    Sanitize one dump

    Args:
        args: Parsed command-line arguments
    """
    policies = load_policies(args.config)
    if args.strategy:
        policies.strategy = GenerationStrategy(args.strategy)

    generator = create_generator(policies.strategy, pepper=get_pepper())

    metrics = None
    if args.metrics_port:
        metrics = initialize_metrics(port=args.metrics_port)

    tracing = bool(args.otlp_endpoint or args.trace_console)
    if tracing:
        initialize_tracing(
            otlp_endpoint=args.otlp_endpoint,
            console_export=args.trace_console,
        )

    try:
        with ExitStack() as stack:
            source = open_input(args.input, stack)
            output = open_output(args.output, stack)

            scanner = DumpScanner(
                policies,
                output,
                generator=generator,
                metrics=metrics["sanitization"] if metrics else None,
            )
            scanner.run(source)
    finally:
        if metrics:
            metrics["app_info"].update_uptime()
            metrics["publisher"].stop()
        if tracing:
            shutdown_tracing()


def cmd_validate(args: argparse.Namespace) -> None:
    """
    Validate a policy configuration file

    Args:
        args: Parsed command-line arguments
    """
    policies = load_policies(args.config)
    column_count = sum(len(table) for table in policies.tables.values())
    print(
        f"{args.config}: OK ({len(policies)} table(s), {column_count} column "
        f"policy(ies), strategy: {policies.strategy})"
    )

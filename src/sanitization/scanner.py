"""
Streaming dump scanner.

Drives a single forward pass over a PostgreSQL plain-text dump, tracking
COPY blocks with a two-state machine and rewriting the data rows of tables
that have a column policy.

Line events, in priority order:

- BLANK_OR_COMMENT: empty line or ``--`` comment, closes any block
- END_MARKER: the ``\\.`` end-of-data line, closes the block
- HEADER: a ``COPY ... FROM stdin;`` statement while no block is open
- DATA: a line not ending with ``;`` while a block is open
- STATEMENT: anything else, passed through

The dump grammar guarantees that only statements end with ``;`` and data
rows never do. The scanner depends on that guarantee: a data row ending in
``;`` is treated as a statement and passed through.
"""

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from transformation.memo import PersistenceMemo
from transformation.transformers import ReplacementGenerator, RowOutcome, RowSanitizer
from transformation.transformers.rules import create_generator
from utils.logging import ContextLogger
from utils.metrics import SanitizationMetrics
from utils.tracing import add_span_attributes, add_span_event, trace_operation

from .copy_block import CopyBlock, is_copy_statement, parse_copy_header
from .errors import SanitizationError
from .policy import PolicySet
from .tokenizer import END_OF_DATA

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "--"
STATEMENT_TERMINATOR = ";"


class ScannerState(Enum):
    OUTSIDE = "outside"
    IN_BLOCK = "in_block"


class LineEvent(Enum):
    BLANK_OR_COMMENT = "blank_or_comment"
    END_MARKER = "end_marker"
    HEADER = "header"
    DATA = "data"
    STATEMENT = "statement"


def classify_line(line: str, state: ScannerState) -> LineEvent:
    """
    Classify one input line (without its terminator) for the given state.
    """
    if not line or line.startswith(COMMENT_PREFIX):
        return LineEvent.BLANK_OR_COMMENT

    if line == END_OF_DATA:
        return LineEvent.END_MARKER

    if line.endswith(STATEMENT_TERMINATOR):
        if state is ScannerState.OUTSIDE and is_copy_statement(line):
            return LineEvent.HEADER
        return LineEvent.STATEMENT

    if state is ScannerState.IN_BLOCK:
        return LineEvent.DATA

    return LineEvent.STATEMENT


@dataclass
class ScanStats:
    """Counters for one scanner run."""

    lines: int = 0
    blocks: int = 0
    sanitized_blocks: int = 0
    rows: int = 0
    rows_sanitized: int = 0
    rows_bypassed: int = 0


def _split_terminator(raw_line: str) -> tuple[str, str]:
    if raw_line.endswith("\r\n"):
        return raw_line[:-2], "\r\n"
    if raw_line.endswith("\n"):
        return raw_line[:-1], "\n"
    return raw_line, ""


class DumpScanner:
    """
    Sanitize a dump stream line by line.

    The scanner owns the run's persistence memo and replacement generator
    and hands them to a RowSanitizer for every COPY block whose table has a
    policy. Every input line produces exactly one output line.
    """

    def __init__(
        self,
        policies: PolicySet,
        output: TextIO,
        generator: ReplacementGenerator | None = None,
        memo: PersistenceMemo | None = None,
        metrics: SanitizationMetrics | None = None,
    ):
        """
        Initialize dump scanner.

        Args:
            policies: Per-table column policies
            output: Text stream receiving the sanitized dump
            generator: Replacement strategy (default: from policies.strategy)
            memo: Persistence memo (default: a fresh one for this run)
            metrics: Prometheus metrics (default: global registry)
        """
        self.policies = policies
        self.output = output
        self.generator = generator or create_generator(policies.strategy)
        self.memo = memo if memo is not None else PersistenceMemo()
        self.metrics = metrics or SanitizationMetrics()

        self.state = ScannerState.OUTSIDE
        self.block: CopyBlock | None = None
        self.sanitizer: RowSanitizer | None = None
        self.stats = ScanStats()

        self._block_started: float | None = None
        self._log = ContextLogger(__name__)

    def run(self, lines: Iterable[str]) -> ScanStats:
        """
        Process every line of the input and write the result.

        Args:
            lines: Input lines, each including its line terminator

        Returns:
            ScanStats for the run

        Raises:
            SanitizationError: On any fatal input or generation failure;
                nothing more is written after the failing line
        """
        with trace_operation("sanitize_dump") as span:
            try:
                for raw_line in lines:
                    self.process_line(raw_line)
                self._close_block()
                self.output.flush()
            except SanitizationError:
                self.metrics.record_run(success=False)
                self._log.error(
                    "Sanitization aborted", line_number=self.stats.lines
                )
                raise

            self.metrics.record_run(success=True)
            self.metrics.update_memo_size(len(self.memo))
            span.set_attribute("lines", self.stats.lines)
            span.set_attribute("blocks", self.stats.blocks)
            span.set_attribute("rows_sanitized", self.stats.rows_sanitized)

        logger.info(
            f"Processed {self.stats.lines} line(s), {self.stats.blocks} COPY "
            f"block(s), sanitized {self.stats.rows_sanitized} row(s), "
            f"bypassed {self.stats.rows_bypassed}"
        )
        return self.stats

    def process_line(self, raw_line: str) -> None:
        """Classify one line, update the block state and emit its output."""
        self.stats.lines += 1
        line, terminator = _split_terminator(raw_line)
        event = classify_line(line, self.state)

        if event in (LineEvent.BLANK_OR_COMMENT, LineEvent.END_MARKER):
            self.output.write(raw_line)
            self._close_block()
            self.output.flush()
            return

        if event is LineEvent.HEADER:
            self._open_block(parse_copy_header(line))
        elif event is LineEvent.DATA:
            line = self._sanitize_row(line)
            raw_line = line + terminator

        self.output.write(raw_line)

    def _open_block(self, block: CopyBlock) -> None:
        self.block = block
        self.state = ScannerState.IN_BLOCK
        self.stats.blocks += 1

        table_policy = self.policies.get(block.table_name)
        self.metrics.record_block(has_policy=table_policy is not None)
        add_span_event(
            "copy_block",
            table_name=block.table_name,
            has_policy=table_policy is not None,
        )

        if table_policy is None:
            self.sanitizer = None
            return

        self.sanitizer = RowSanitizer(
            table_policy, block.column_names, self.generator, self.memo
        )
        self.stats.sanitized_blocks += 1
        self._block_started = time.perf_counter()
        self._log.update_context(table_name=block.table_name)
        self._log.debug("Sanitizing COPY block", columns=block.column_count)

    def _close_block(self) -> None:
        if self.state is ScannerState.OUTSIDE:
            return

        if self._block_started is not None:
            duration = time.perf_counter() - self._block_started
            self.metrics.record_block_duration(duration)
            add_span_attributes(last_block=self.block.table_name)
            self._log.debug("Finished COPY block", duration_s=round(duration, 3))
            self._block_started = None

        self._log.clear_context("table_name")
        self.metrics.update_memo_size(len(self.memo))
        self.state = ScannerState.OUTSIDE
        self.block = None
        self.sanitizer = None

    def _sanitize_row(self, line: str) -> str:
        self.stats.rows += 1

        if self.sanitizer is None:
            self.metrics.record_row("passthrough")
            return line

        result = self.sanitizer.sanitize_line(line)
        if result.outcome is RowOutcome.BYPASSED:
            self.stats.rows_bypassed += 1
        else:
            self.stats.rows_sanitized += 1
        self.metrics.record_row(str(result.outcome))
        return result.line


def sanitize_stream(
    source: Iterable[str],
    output: TextIO,
    policies: PolicySet,
    generator: ReplacementGenerator | None = None,
    memo: PersistenceMemo | None = None,
) -> ScanStats:
    """
    Sanitize a dump from any iterable of lines into an output stream.

    Convenience wrapper around DumpScanner for one-shot runs.
    """
    scanner = DumpScanner(policies, output, generator=generator, memo=memo)
    return scanner.run(source)

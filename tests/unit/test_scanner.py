"""
Unit tests for the streaming dump scanner.

Tests line classification, COPY block tracking, row rewriting and the
failure behavior of a sanitization run.
"""

import io

import pytest
from prometheus_client import CollectorRegistry

from sanitization.config import load_policies
from sanitization.errors import MalformedHeaderError, RowShapeError
from sanitization.policy import PolicySet
from sanitization.scanner import (
    DumpScanner,
    LineEvent,
    ScannerState,
    classify_line,
    sanitize_stream,
)
from transformation.memo import PersistenceMemo
from transformation.transformers import KeyedHashGenerator
from utils.metrics import SanitizationMetrics

PEPPER = b"scanner-test-pepper-0123"

HEADER = 'COPY public."Users" ("Id", "Email", "Name") FROM stdin;'

POLICIES = {
    "tables": {
        'public."Users"': {
            "Email": {"type": "email", "persist": True, "ignore": ["admin@corp.com"]},
        },
    },
}


def run_scanner(text, document=POLICIES, generator=None, memo=None, metrics=None):
    """Run the scanner over text and return (output, stats)."""
    output = io.StringIO()
    scanner = DumpScanner(
        PolicySet.from_dict(document),
        output,
        generator=generator,
        memo=memo,
        metrics=metrics or SanitizationMetrics(registry=CollectorRegistry()),
    )
    stats = scanner.run(io.StringIO(text, newline=""))
    return output.getvalue(), stats


class TestClassifyLine:
    """Test line event classification."""

    @pytest.mark.parametrize("state", list(ScannerState))
    def test_blank_and_comment(self, state):
        assert classify_line("", state) is LineEvent.BLANK_OR_COMMENT
        assert classify_line("-- a comment", state) is LineEvent.BLANK_OR_COMMENT

    def test_end_marker(self):
        assert classify_line("\\.", ScannerState.IN_BLOCK) is LineEvent.END_MARKER

    def test_header_outside_block(self):
        assert classify_line(HEADER, ScannerState.OUTSIDE) is LineEvent.HEADER

    def test_header_inside_block_is_statement(self):
        assert classify_line(HEADER, ScannerState.IN_BLOCK) is LineEvent.STATEMENT

    def test_data_inside_block(self):
        assert classify_line("1\ta@b.com\tJo", ScannerState.IN_BLOCK) is LineEvent.DATA

    def test_unterminated_line_outside_block(self):
        assert classify_line("    \"Id\" integer,", ScannerState.OUTSIDE) is LineEvent.STATEMENT

    def test_statement(self):
        assert classify_line("SET client_encoding = 'UTF8';", ScannerState.OUTSIDE) is (
            LineEvent.STATEMENT
        )

    def test_non_copy_statement_inside_block(self):
        line = "SELECT 1;"

        assert classify_line(line, ScannerState.IN_BLOCK) is LineEvent.STATEMENT


class TestDumpScanner:
    """Test the line-by-line scanner."""

    def test_one_output_line_per_input_line(self):
        text = "\n".join([
            "-- dump",
            "SET x = 1;",
            HEADER,
            "1\tabc@d.com\tJo",
            "2\t\\N\tAnn",
            "\\.",
            "",
        ])

        output, stats = run_scanner(text)

        assert len(output.splitlines()) == len(text.splitlines())
        assert stats.lines == 6
        assert stats.blocks == 1
        assert stats.rows_sanitized == 2

    def test_non_data_lines_unchanged(self):
        text = "-- dump\n\nSET x = 1;\n" + HEADER + "\n1\tabc@d.com\tJo\n\\.\n"

        output, _ = run_scanner(text)
        lines = output.splitlines()

        assert lines[:4] == ["-- dump", "", "SET x = 1;", HEADER]
        assert lines[5] == "\\."

    def test_data_row_rewritten(self):
        text = HEADER + "\n1\tabc@d.com\tJo\n\\.\n"

        output, _ = run_scanner(text)
        fields = output.splitlines()[1].split("\t")

        assert fields[0] == "1"
        assert fields[1] != "abc@d.com"
        assert fields[1].endswith(".com")
        assert fields[2] == "Jo"

    def test_table_without_policy_passes_through(self):
        text = 'COPY public."Products" ("Id", "Name") FROM stdin;\n1\tWidget\n\\.\n'

        output, stats = run_scanner(text)

        assert output == text
        assert stats.rows == 1
        assert stats.rows_sanitized == 0

    def test_ignored_row_byte_identical(self):
        row = "0\tadmin@corp.com\tAdmin"
        text = HEADER + "\n" + row + "\n1\tabc@d.com\tJo\n\\.\n"

        output, stats = run_scanner(text)

        assert output.splitlines()[1] == row
        assert stats.rows_bypassed == 1
        assert stats.rows_sanitized == 1

    def test_null_field_untouched(self):
        text = HEADER + "\n2\t\\N\tAnn\n\\.\n"

        output, _ = run_scanner(text)

        assert output == text

    def test_crlf_preserved(self):
        text = HEADER + "\r\n1\tabc@d.com\tJo\r\n\\.\r\n"

        output, _ = run_scanner(text)

        assert output.count("\r\n") == 3
        assert output.split("\r\n")[1].split("\t")[2] == "Jo"

    def test_missing_final_newline_preserved(self):
        text = HEADER + "\n1\tabc@d.com\tJo"

        output, _ = run_scanner(text)

        assert not output.endswith("\n")
        assert output.count("\n") == 1

    def test_blank_line_closes_block(self):
        """Test a data-looking line after a blank line is not rewritten"""
        text = HEADER + "\n1\tabc@d.com\tJo\n\n2\tx@y.com\tAnn\n"

        output, stats = run_scanner(text)

        assert output.splitlines()[3] == "2\tx@y.com\tAnn"
        assert stats.rows == 1

    def test_data_row_ending_in_semicolon_passes_through(self):
        text = HEADER + "\n1\tabc@d.com\tJo;\n\\.\n"

        output, stats = run_scanner(text)

        assert output == text
        assert stats.rows == 0

    def test_persisted_values_consistent_across_tables(self):
        document = {
            "tables": {
                'public."Users"': {"Email": {"type": "email", "persist": True}},
                'public."EmailHistories"': {"Email": {"type": "email", "persist": True}},
            },
        }
        text = (
            HEADER + "\n1\tabc@d.com\tJo\n\\.\n"
            'COPY public."EmailHistories" ("Id", "Email") FROM stdin;\n'
            "7\tabc@d.com\n\\.\n"
        )

        output, _ = run_scanner(text, document=document)
        lines = output.splitlines()

        assert lines[1].split("\t")[1] == lines[4].split("\t")[1]

    def test_shared_memo(self, memo):
        memo.put("abc@d.com", "fixed@x.com")
        text = HEADER + "\n1\tabc@d.com\tJo\n\\.\n"

        output, _ = run_scanner(text, memo=memo)

        assert output.splitlines()[1] == "1\tfixed@x.com\tJo"

    def test_hash_strategy_reproducible(self):
        text = HEADER + "\n1\tabc@d.com\tJo\n\\.\n"

        first, _ = run_scanner(text, generator=KeyedHashGenerator(PEPPER))
        second, _ = run_scanner(text, generator=KeyedHashGenerator(PEPPER))

        assert first == second
        assert first != text

    def test_metrics_recorded(self):
        registry = CollectorRegistry()
        text = (
            HEADER + "\n0\tadmin@corp.com\tAdmin\n1\tabc@d.com\tJo\n\\.\n"
            'COPY public."Products" ("Id") FROM stdin;\n1\n\\.\n'
        )

        run_scanner(text, metrics=SanitizationMetrics(registry=registry))

        def sample(name, **labels):
            return registry.get_sample_value(name, labels)

        assert sample("sanitization_runs_total", status="success") == 1
        assert sample("copy_blocks_total", has_policy="true") == 1
        assert sample("copy_blocks_total", has_policy="false") == 1
        assert sample("rows_processed_total", outcome="sanitized") == 1
        assert sample("rows_processed_total", outcome="bypassed") == 1
        assert sample("rows_processed_total", outcome="passthrough") == 1
        assert sample("memo_entries") == 1

    def test_sanitize_stream(self, memo):
        output = io.StringIO()
        text = HEADER + "\n1\tabc@d.com\tJo\n\\.\n"

        stats = sanitize_stream(
            io.StringIO(text), output, PolicySet.from_dict(POLICIES), memo=memo
        )

        assert stats.rows_sanitized == 1
        assert "abc@d.com" in memo


class TestDumpScannerFailures:
    """Test fatal input errors abort the run."""

    def test_malformed_header(self):
        text = "SET x = 1;\nCOPY public.t FROM stdin;\n1\n\\.\n"
        output = io.StringIO()
        scanner = DumpScanner(
            PolicySet.from_dict(POLICIES),
            output,
            metrics=SanitizationMetrics(registry=CollectorRegistry()),
        )

        with pytest.raises(MalformedHeaderError):
            scanner.run(io.StringIO(text))

        assert output.getvalue() == "SET x = 1;\n"

    def test_row_shape_error_stops_output(self):
        text = HEADER + "\n1\tabc@d.com\tJo\n2\tshort\n3\tx@y.com\tAnn\n\\.\n"
        output = io.StringIO()
        registry = CollectorRegistry()
        scanner = DumpScanner(
            PolicySet.from_dict(POLICIES),
            output,
            metrics=SanitizationMetrics(registry=registry),
        )

        with pytest.raises(RowShapeError) as exc_info:
            scanner.run(io.StringIO(text))

        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 2
        assert len(output.getvalue().splitlines()) == 2
        assert "short" not in output.getvalue()
        assert registry.get_sample_value(
            "sanitization_runs_total", {"status": "failed"}
        ) == 1

    def test_passthrough_rows_not_tokenized(self):
        """Test rows of tables without policy are not tokenized"""
        text = 'COPY public.t ("a", "b") FROM stdin;\nonly-one\n\\.\n'

        output, _ = run_scanner(text)

        assert output == text


class TestSampleDump:
    """Test the scanner against the sample dump fixture."""

    def setup_method(self):
        self.memo = PersistenceMemo()

    def sanitize(self, fixtures_dir):
        policies = load_policies(fixtures_dir / "policies.yaml")
        with open(fixtures_dir / "sample_dump.sql", encoding="utf-8", newline="") as f:
            original = f.read()

        output = io.StringIO()
        DumpScanner(
            policies,
            output,
            generator=KeyedHashGenerator(PEPPER),
            memo=self.memo,
            metrics=SanitizationMetrics(registry=CollectorRegistry()),
        ).run(io.StringIO(original, newline=""))
        return original.splitlines(), output.getvalue().splitlines()

    def rows(self, lines, header_prefix):
        start = next(i for i, line in enumerate(lines) if line.startswith(header_prefix))
        end = lines.index("\\.", start)
        return [line.split("\t") for line in lines[start + 1:end]]

    def test_line_count_preserved(self, fixtures_dir):
        original, sanitized = self.sanitize(fixtures_dir)

        assert len(sanitized) == len(original)

    def test_non_copy_content_identical(self, fixtures_dir):
        original, sanitized = self.sanitize(fixtures_dir)

        for before, after in zip(original, sanitized):
            if "\t" not in before:
                assert before == after

    def test_users_sanitized(self, fixtures_dir):
        original, sanitized = self.sanitize(fixtures_dir)
        before = self.rows(original, 'COPY public."Users"')
        after = self.rows(sanitized, 'COPY public."Users"')

        assert after[0][0] == "1"
        assert after[0][1] != before[0][1]
        assert after[0][1] == after[2][1]
        assert len(after[0][2]) == 8
        assert "SE123123-ABC" not in after[0][3]
        assert '"PostalCode": "2000"' in after[0][3]
        assert after[0][4] == before[0][4]
        assert after[1][2:4] == ["\\N", "\\N"]

    def test_email_shared_with_history(self, fixtures_dir):
        _, sanitized = self.sanitize(fixtures_dir)
        users = self.rows(sanitized, 'COPY public."Users"')
        history = self.rows(sanitized, 'COPY public."EmailHistories"')

        assert history[0][2] == users[0][1]

    def test_license_keys(self, fixtures_dir):
        original, sanitized = self.sanitize(fixtures_dir)
        after = self.rows(sanitized, 'COPY public."LicenseKeys"')

        assert after[0][0].endswith("-TRIAL")
        assert after[0][0] != original[original.index(
            'COPY public."LicenseKeys" ("Key", "UserId", "Trial") FROM stdin;'
        ) + 1].split("\t")[0]
        assert after[1] == ["SYSTEM-KEY-0001", "\\N", "f"]
        assert after[2][0] == after[0][0]

    def test_arrays_share_memo(self, fixtures_dir):
        _, sanitized = self.sanitize(fixtures_dir)
        after = self.rows(sanitized, 'COPY public."TransferRequests"')

        assert after[0][1] == "{" + self.memo.get("abc123")[0] + "," + (
            self.memo.get("untzxxx123")[0] + "}"
        )
        assert after[1][1] == "{}"

    def test_products_untouched(self, fixtures_dir):
        original, sanitized = self.sanitize(fixtures_dir)

        assert self.rows(sanitized, 'COPY public."Products"') == self.rows(
            original, 'COPY public."Products"'
        )

"""
Unit tests for COPY header parsing.
"""

import pytest

from sanitization.copy_block import (
    CopyBlock,
    get_column_names,
    get_table_name,
    is_copy_statement,
    parse_copy_header,
)
from sanitization.errors import MalformedHeaderError

EMAIL_HISTORIES_HEADER = (
    'COPY public."EmailHistories" ("Id", "UserId", "Email", "Created", "LastUpdated") '
    "FROM stdin;"
)


class TestGetColumnNames:
    """Tests for get_column_names"""

    def test_quoted_columns(self):
        """Test quoted column names are unquoted in order"""
        result = get_column_names(EMAIL_HISTORIES_HEADER)

        assert result == ("Id", "UserId", "Email", "Created", "LastUpdated")

    def test_unquoted_columns(self):
        """Test plain lower-case column names"""
        result = get_column_names("COPY public.users (id, email) FROM stdin;")

        assert result == ("id", "email")

    def test_single_column(self):
        result = get_column_names('COPY public.t ("only") FROM stdin;')

        assert result == ("only",)

    def test_duplicate_columns_kept(self):
        """Test position, not uniqueness, is what matters"""
        result = get_column_names("COPY t (a, a, b) FROM stdin;")

        assert result == ("a", "a", "b")

    def test_missing_parentheses(self):
        with pytest.raises(MalformedHeaderError):
            get_column_names("COPY public.users FROM stdin;")

    def test_missing_closing_parenthesis(self):
        with pytest.raises(MalformedHeaderError):
            get_column_names("COPY public.users (id, email FROM stdin;")

    def test_empty_column_list(self):
        with pytest.raises(MalformedHeaderError):
            get_column_names("COPY public.users () FROM stdin;")


class TestGetTableName:
    """Tests for get_table_name"""

    def test_quoting_preserved(self):
        """Test table name keeps its embedded quotes"""
        assert get_table_name(EMAIL_HISTORIES_HEADER) == 'public."EmailHistories"'

    def test_not_a_copy_statement(self):
        with pytest.raises(MalformedHeaderError):
            get_table_name("SELECT 1;")

    def test_is_copy_statement(self):
        assert is_copy_statement(EMAIL_HISTORIES_HEADER)
        assert not is_copy_statement("COPYRIGHT notice;")
        assert not is_copy_statement("SET search_path = public;")


class TestParseCopyHeader:
    """Tests for parse_copy_header"""

    def test_parse_header(self):
        block = parse_copy_header(EMAIL_HISTORIES_HEADER)

        assert isinstance(block, CopyBlock)
        assert block.table_name == 'public."EmailHistories"'
        assert block.column_names[2] == "Email"
        assert block.column_count == 5

    def test_malformed_header_raises(self):
        with pytest.raises(MalformedHeaderError):
            parse_copy_header("COPY public.users FROM stdin;")

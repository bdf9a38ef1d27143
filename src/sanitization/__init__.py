"""
Sanitization of PostgreSQL plain-text dumps

This package rewrites the data rows of COPY blocks, replacing configured
sensitive column values while keeping the dump loadable.

Components:
- copy_block: COPY header parsing
- tokenizer: Row splitting/rejoining and COPY text escapes
- policy: Per-table column policies
- config: Policy document loading and validation
- scanner: Streaming block state machine
- cli: Command-line entry point

Usage:
    from sanitization.config import load_policies
    from sanitization.scanner import DumpScanner

    scanner = DumpScanner(load_policies("policies.yaml"), sys.stdout)
    scanner.run(sys.stdin)
"""

__version__ = "1.0.0"
__all__ = ["errors", "copy_block", "tokenizer", "policy", "config", "scanner", "cli"]

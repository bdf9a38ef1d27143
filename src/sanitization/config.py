"""
Policy configuration loading.

Reads the sanitization policy document (YAML or JSON), validates it against
a JSON schema and builds the PolicySet consumed by the scanner.

Example document:

    strategy: hash
    tables:
      'public."Users"':
        Email: {type: email, persist: true}
        CompanyInfo: {type: json, keys: [TaxId, CompanyName]}
      'public."LicenseKeys"':
        Key:
          type: text
          persist: true
          suffixes: ["-TRIAL", "-NFR"]
          ignore: ["SYSTEM-KEY"]
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from utils.tracing import trace_function

from .errors import ConfigurationError
from .policy import PolicySet

logger = logging.getLogger(__name__)

_STRING_LIST = {"type": "array", "items": {"type": "string"}}
_IGNORE_VALUES = {"type": "array", "items": {"type": ["string", "integer"]}}

COLUMN_SCHEMA: dict[str, Any] = {
    "type": ["object", "null"],
    "properties": {
        "type": {"enum": ["text", "email", "json", "array", "text_array"]},
        "persist": {"type": "boolean"},
        "set_null": {"type": "boolean"},
        "suffixes": _STRING_LIST,
        "keys": _STRING_LIST,
        "max_length": {"type": "integer", "minimum": 1},
        "ignore": _IGNORE_VALUES,
        "ignore_rows": {
            "type": "object",
            "additionalProperties": _IGNORE_VALUES,
        },
    },
    "additionalProperties": False,
}

POLICY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "strategy": {"enum": ["random", "hash"]},
        "tables": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "additionalProperties": COLUMN_SCHEMA,
            },
        },
    },
    "required": ["tables"],
    "additionalProperties": False,
}


def validate_document(document: Any) -> None:
    """
    Validate a parsed policy document against POLICY_SCHEMA.

    Raises:
        ConfigurationError: If the document does not match the schema
    """
    try:
        jsonschema.validate(instance=document, schema=POLICY_SCHEMA)
    except jsonschema.exceptions.ValidationError as e:
        location = "/".join(str(part) for part in e.absolute_path) or "<root>"
        raise ConfigurationError(
            f"Invalid policy configuration at {location}: {e.message}"
        ) from e


def build_policies(document: Mapping[str, Any]) -> PolicySet:
    """Validate an already-parsed document and build its PolicySet."""
    validate_document(document)
    return PolicySet.from_dict(document)


def load_document(path: str | Path) -> Any:
    """
    Read a policy document from disk.

    ``.json`` files are parsed as JSON, everything else as YAML.

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read policy file {path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot parse policy file {path}: {e}") from e


@trace_function(component="config")
def load_policies(path: str | Path) -> PolicySet:
    """
    Load, validate and build the policies from a configuration file.

    Args:
        path: Path to a YAML or JSON policy document

    Returns:
        PolicySet for the run

    Raises:
        ConfigurationError: If the file is missing, unparseable or invalid
    """
    logger.info(f"Loading sanitization policies from {path}")
    return build_policies(load_document(path))

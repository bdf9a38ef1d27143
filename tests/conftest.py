"""
Pytest configuration and fixtures for dump sanitizer tests.
Provides shared policies, generators and sample dump content.
"""

from pathlib import Path

import pytest

from sanitization.policy import PolicySet
from transformation.memo import PersistenceMemo
from transformation.transformers import KeyedHashGenerator, RandomStringGenerator

TEST_PEPPER = b"test-pepper-0123456789abcdef"

USERS_COLUMNS = (
    "Id", "Email", "ScreenName", "CompanyInfo", "Keys", "Role",
)

USERS_HEADER = (
    'COPY public."Users" ("Id", "Email", "ScreenName", "CompanyInfo", "Keys", "Role") '
    "FROM stdin;"
)


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    """Get test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def memo() -> PersistenceMemo:
    """Fresh persistence memo for one test run."""
    return PersistenceMemo()


@pytest.fixture
def random_generator() -> RandomStringGenerator:
    return RandomStringGenerator()


@pytest.fixture
def hash_generator() -> KeyedHashGenerator:
    """Keyed hash generator with a fixed pepper."""
    return KeyedHashGenerator(pepper=TEST_PEPPER)


@pytest.fixture
def policy_document() -> dict:
    """Policy document covering every column category."""
    return {
        "strategy": "random",
        "tables": {
            'public."Users"': {
                "Email": {"type": "email", "persist": True},
                "ScreenName": {"type": "text"},
                "CompanyInfo": {"type": "json", "keys": ["TaxId", "CompanyName"]},
                "Keys": {"type": "array", "persist": True},
                "Role": {"ignore": ["service"]},
            },
            'public."LicenseKeys"': {
                "Key": {
                    "type": "text",
                    "persist": True,
                    "suffixes": ["-TRIAL", "-NFR"],
                },
                "Notes": {"set_null": True},
            },
        },
    }


@pytest.fixture
def policies(policy_document: dict) -> PolicySet:
    return PolicySet.from_dict(policy_document)

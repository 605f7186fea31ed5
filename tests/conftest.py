"""
Pytest configuration and shared fixtures for hsdp-api tests.
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from hsdp_api.iam.token import StaticTokenProvider
from hsdp_api.transport.client import BaseClient
from hsdp_api.transport.mock import MockAdapter

BASE_URL = "https://example.org/store/fhir/"
ROOT_ORG = "org1"
TOKEN = "YM7eZakYwqoui5znoH4g"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_adapter() -> MockAdapter:
    return MockAdapter()


@pytest.fixture
def token_provider(mock_adapter: MockAdapter) -> StaticTokenProvider:
    """Provider whose session routes every call to ``mock_adapter``."""
    provider = StaticTokenProvider(token=TOKEN, max_retries=0)
    provider.session.mount("https://", mock_adapter)
    provider.session.mount("http://", mock_adapter)
    yield provider
    provider.close()


@pytest.fixture
def client(token_provider: StaticTokenProvider) -> Generator[BaseClient, None, None]:
    c = BaseClient(token_provider, base_url=BASE_URL, root_org_id=ROOT_ORG, api_version="1")
    yield c
    c.close()


@pytest.fixture
def make_config_yaml(temp_dir: Path):
    """
    Factory fixture that writes a configuration file and returns its path.

    Usage:
        def test_something(make_config_yaml):
            path = make_config_yaml("cdr:\\n  cdr_url: https://cdr.example.org\\n")
    """
    def _make_config(content: str) -> Path:
        config_path = temp_dir / "config.yaml"
        config_path.write_text(content)
        return config_path
    return _make_config


# Hypothesis settings for property-based tests
from hypothesis import settings, Verbosity

settings.register_profile("hsdp", max_examples=100, verbosity=Verbosity.normal)

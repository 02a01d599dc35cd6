"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Switches the application into its testing environment before any package
module reads its settings.
"""

import os
import tempfile
from pathlib import Path
from typing import Generator, List

os.environ.setdefault("RAILROAD_DSL_ENVIRONMENT", "testing")
os.environ.setdefault(
    "RAILROAD_DSL_STORAGE_PATH", str(Path(tempfile.gettempdir()) / "railroad_dsl_test")
)

import pytest
from fastapi.testclient import TestClient
from pydantic_settings import SettingsConfigDict

# Import application modules
from railroad_dsl.config.settings import Settings, reload_settings
from railroad_dsl.api.main import create_app
from railroad_dsl.core.dsl.grammar import get_parser


EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    debug: bool = True
    log_level: str = "DEBUG"

    model_config = SettingsConfigDict(env_file=".env.test", env_prefix="RAILROAD_DSL_")


@pytest.fixture(scope="session")
def test_settings() -> TestSettings:
    """Test settings fixture."""
    return TestSettings()


@pytest.fixture
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[pytest.MonkeyPatch, None, None]:
    """
    Allow a test to change settings through environment variables.

    Call ``reload_settings()`` after setting variables; the original settings
    are restored afterwards.
    """
    yield monkeypatch
    monkeypatch.undo()
    reload_settings()


@pytest.fixture(scope="session")
def parser():
    """Shared grammar parser."""
    return get_parser()


@pytest.fixture(scope="session")
def example_files() -> List[Path]:
    """Example diagram sources shipped with the project."""
    return sorted(EXAMPLES_DIR.glob("*.diagram.txt"))


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create test client for the API."""
    with TestClient(create_app()) as test_client:
        yield test_client

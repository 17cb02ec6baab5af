"""Test configuration and fixtures for the entire test suite."""

import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

from tests.unit.aggregator.helpers import FakeClock


# Add the project root to the Python path
@pytest.fixture(scope="session", autouse=True)
def setup_path() -> None:
    """Add the project root to the Python path."""
    project_root = Path(__file__).parent.parent
    sys.path.insert(0, str(project_root))

    # Exchange credentials and AGGREGATOR_* overrides may live in .env
    load_dotenv()


@pytest.fixture
def clock() -> FakeClock:
    """Millisecond clock for dispatcher tests, starting at zero."""
    return FakeClock()

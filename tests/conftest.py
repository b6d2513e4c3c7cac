"""Pytest configuration for the Monkey test suite."""

import sys
from pathlib import Path

import pytest

# Add src directory to path for monkey imports
SRC_DIR = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_DIR))

from monkey.env import Environment  # noqa: E402
from monkey.session import Session  # noqa: E402


@pytest.fixture
def env() -> Environment:
    """A fresh top-level environment."""
    return Environment()


@pytest.fixture
def session() -> Session:
    """A fresh session whose bindings persist across run() calls."""
    return Session()

"""Pytest configuration for the Vie test suite."""

import shutil
import sys
from pathlib import Path

import pytest

# Add src directory to path for vie imports
SRC_DIR = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_DIR))


@pytest.fixture
def node_path() -> str:
    """Path to a Node.js executable; skips the test when none is installed."""
    path = shutil.which("node")
    if path is None:
        pytest.skip("node not installed")
    return path

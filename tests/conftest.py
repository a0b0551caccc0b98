"""
Pytest configuration and shared fixtures for the buildctl test suite.

This module provides common fixtures, test utilities, and configuration
for all test modules in the buildctl project.
"""

import io
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from buildctl.components.base import BuildListener  # noqa: E402
from buildctl.orchestration.context import EngineContext  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")


# ============================================================================
# Test Utilities
# ============================================================================


class RecordingListener(BuildListener):
    """Listener that records every event it receives, in order."""

    def __init__(self):
        self.events: List[Any] = []

    @property
    def types(self) -> List[str]:
        return [event.type.value for event in self.events]

    def build_started(self, event):
        self.events.append(event)

    def build_finished(self, event):
        self.events.append(event)

    def target_started(self, event):
        self.events.append(event)

    def target_finished(self, event):
        self.events.append(event)

    def task_started(self, event):
        self.events.append(event)

    def task_finished(self, event):
        self.events.append(event)

    def message_logged(self, event):
        self.events.append(event)


def write_toml(path: Path, data: Dict[str, Any]) -> Path:
    """Write ``data`` as TOML to ``path`` and return the path."""
    import toml

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        toml.dump(data, f)
    return path


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def recording_listener():
    """Provide a fresh recording listener."""
    return RecordingListener()


@pytest.fixture
def engine_context(tmp_path):
    """Engine context rooted at a temporary directory with in-memory streams."""
    return EngineContext.create(
        out=io.StringIO(),
        err=io.StringIO(),
        stdin=io.StringIO(""),
        cwd=tmp_path,
    )


@pytest.fixture
def sample_build_data() -> Dict[str, Any]:
    """A small project with a default target, a dependency and a hidden target."""
    return {
        "project": {
            "name": "demo",
            "description": "Demo project",
            "default": "build",
        },
        "properties": {
            "out": "dist",
        },
        "targets": {
            "prepare": {
                "tasks": [{"echo": "Preparing ${out}"}],
            },
            "build": {
                "description": "Build everything",
                "depends": ["prepare"],
                "tasks": [{"echo": "Building into ${out}"}],
            },
            "internal": {
                "hidden": True,
                "tasks": [{"echo": "never listed"}],
            },
        },
    }


@pytest.fixture
def build_file(tmp_path, sample_build_data):
    """Write the sample project to ``build.toml`` in the temporary directory."""
    return write_toml(tmp_path / "build.toml", sample_build_data)


@pytest.fixture
def make_build_file(tmp_path):
    """Factory writing an arbitrary build file; returns its path."""

    def _make(data: Dict[str, Any], name: str = "build.toml", directory: Optional[Path] = None) -> Path:
        return write_toml((directory or tmp_path) / name, data)

    return _make

"""
Unit tests for the immediate-exit actions and the diagnostics report.
"""

import io
import tomllib
from unittest.mock import patch

import pytest

from buildctl.cli.actions import (
    USAGE,
    init_build_file,
    print_usage,
    print_version,
    resolve_init_path,
)
from buildctl.cli.diagnostics import do_report
from buildctl.components import create_default_registry
from buildctl.config.settings import DEFAULT_BUILD_CONTENT
from buildctl.orchestration.runner import run_invocation
from buildctl.validation import ConfigurationError


@pytest.mark.unit
class TestUsageAndVersion:
    """Test cases for usage and version output."""

    def test_usage_lists_flags(self):
        stream = io.StringIO()
        print_usage(stream)
        text = stream.getvalue()
        assert text == USAGE
        for flag in ("-buildfile", "-logfile", "-find", "-inputhandler", "-keep-going", "-D<property>"):
            assert flag in text

    def test_version(self):
        stream = io.StringIO()
        print_version(stream)
        assert stream.getvalue() == "buildctl 1.0.0\n"


@pytest.mark.unit
class TestInitBuildFile:
    """Test cases for the sample build file writer."""

    def test_default_location(self, tmp_path):
        created = init_build_file(None, tmp_path)
        assert created == tmp_path / "build.toml"
        assert created.read_text(encoding="utf-8") == DEFAULT_BUILD_CONTENT

    def test_template_is_valid_build_file(self, tmp_path):
        created = init_build_file(None, tmp_path)
        data = tomllib.loads(created.read_text(encoding="utf-8"))
        assert data["project"]["default"] == "main"
        assert data["targets"]["main"]["tasks"] == []

    def test_directory_gets_default_name(self, tmp_path):
        (tmp_path / "sub").mkdir()
        assert init_build_file("sub", tmp_path) == tmp_path / "sub" / "build.toml"

    def test_explicit_file_name(self, tmp_path):
        created = init_build_file(str(tmp_path / "custom.toml"), tmp_path)
        assert created.name == "custom.toml"
        assert created.exists()

    def test_existing_file_rejected(self, tmp_path):
        existing = tmp_path / "build.toml"
        existing.write_text("keep me")
        with pytest.raises(ConfigurationError) as exc_info:
            init_build_file(None, tmp_path)
        assert str(exc_info.value) == "Buildfile already exists."
        assert existing.read_text() == "keep me"

    def test_missing_parent_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_init_path(str(tmp_path / "missing" / "build.toml"), tmp_path)
        assert str(exc_info.value) == "Invalid path for sample buildfile."


@pytest.mark.unit
class TestDiagnostics:
    """Test cases for the diagnostics report."""

    def test_report_sections(self):
        stream = io.StringIO()
        do_report(stream, create_default_registry(), {"host.os": "Linux"})
        text = stream.getvalue()

        assert "buildctl 1.0.0" in text
        assert "memory.total" in text
        assert "loggers : default, silent" in text
        assert "input handlers : console, noninteractive" in text
        assert "host.os : Linux" in text

    def test_disk_figures_use_invocation_directory(self, tmp_path):
        with patch("buildctl.cli.diagnostics.collect_resource_info", return_value={"disk.free": "1 B"}) as collect:
            do_report(io.StringIO(), create_default_registry(), {}, tmp_path)
        collect.assert_called_once_with(tmp_path)

    def test_runner_passes_context_directory(self, engine_context, tmp_path):
        with patch("buildctl.orchestration.runner.do_report") as report:
            run_invocation(["-diagnostics"], engine_context)
        assert report.call_args.args[3] == tmp_path
